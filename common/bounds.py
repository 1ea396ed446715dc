class Bounds:
    def __init__ (self, left, top, width, height):
        self.left = left
        self.top = top
        self.width = width
        self.height = height

    @classmethod
    def from_edges(cls, left, top, right, bottom):
        """
        Build Bounds from inclusive pixel edges (right/bottom are the last covered column/row).
        """
        return cls(left, top, right - left, bottom - top)

    def __str__(self) -> str:
        return f"Bounds({self.left}, {self.top}, {self.width}, {self.height})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bounds):
            return NotImplemented
        return (self.left, self.top, self.width, self.height) == (other.left, other.top, other.width, other.height)

    @property
    def right(self):
        return self.left + self.width

    @property
    def bottom(self):
        return self.top + self.height

    def padded(self, pad_x, pad_y):
        """
        Grow the Bounds object by pad_x on the left/right and pad_y on the top/bottom.

        Returns:
        - Bounds: A new, larger Bounds object.
        """
        return Bounds.from_edges(self.left - pad_x, self.top - pad_y, self.right + pad_x, self.bottom + pad_y)

    def clamped(self, max_x, max_y):
        """
        Clamp all edges into [0, max_x] x [0, max_y].

        Parameters:
        - max_x (int): Largest allowed x (usually image width - 1).
        - max_y (int): Largest allowed y (usually image height - 1).

        Returns:
        - Bounds: A new Bounds object inside the given range.
        """
        left = min(max_x, max(0, self.left))
        right = min(max_x, max(0, self.right))
        top = min(max_y, max(0, self.top))
        bottom = min(max_y, max(0, self.bottom))
        return Bounds.from_edges(left, top, right, bottom)

    def corners(self) -> list[tuple]:
        """
        Corner points in top-left, top-right, bottom-right, bottom-left order.
        """
        return [
            (self.left, self.top),
            (self.right, self.top),
            (self.right, self.bottom),
            (self.left, self.bottom),
        ]

    def area(self):
        """
        Calculate the area of the Bounds object.

        Returns:
        - int: The area of the Bounds object.
        """
        return self.width * self.height
