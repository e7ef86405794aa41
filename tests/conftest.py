import random


class ScriptedRandom(random.Random):
    """Random source that replays scripted draws, then falls back to 'no I/O'."""

    def __init__(self, draws=(), offsets=(), picks=()):
        super().__init__(0)
        self.draws = list(draws)
        self.offsets = list(offsets)
        self.picks = list(picks)

    def randrange(self, *args, **kwargs):
        return self.draws.pop(0) if self.draws else 99

    def randint(self, a, b):
        value = self.offsets.pop(0) if self.offsets else a
        assert a <= value <= b
        return value

    def choice(self, seq):
        return seq[self.picks.pop(0)] if self.picks else seq[0]
