from common.bounds import Bounds


class TestClass:
    def test_bounds1(self):
        bounds = Bounds(0, 0, 10, 10)
        assert bounds.left == 0 and bounds.top == 0 and bounds.width == 10 and bounds.height == 10

    def test_bounds2(self):
        bounds = Bounds(0, 0, 10, 10)
        assert bounds.area() == 100

    def test_bounds3(self):
        bounds = Bounds.from_edges(2, 3, 8, 9)
        assert bounds.right == 8 and bounds.bottom == 9
        assert bounds.width == 6 and bounds.height == 6

    def test_bounds4(self):
        bounds = Bounds.from_edges(10, 10, 20, 30).padded(2, 3)
        assert bounds == Bounds.from_edges(8, 7, 22, 33)

    def test_bounds5(self):
        bounds = Bounds.from_edges(-4, -2, 120, 90).clamped(99, 79)
        assert bounds == Bounds.from_edges(0, 0, 99, 79)

    def test_bounds6(self):
        bounds = Bounds.from_edges(1, 2, 5, 6)
        assert bounds.corners() == [(1, 2), (5, 2), (5, 6), (1, 6)]

    def test_bounds7(self):
        assert str(Bounds(1, 2, 3, 4)) == "Bounds(1, 2, 3, 4)"
        assert Bounds(1, 2, 3, 4) != Bounds(1, 2, 3, 5)
