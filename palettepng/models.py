from dataclasses import dataclass


@dataclass(frozen=True)
class RGBA:
    r: int
    g: int
    b: int
    a: int = 255   # opaque unless stated

    def as_tuple(self):
        return (self.r, self.g, self.b, self.a)
