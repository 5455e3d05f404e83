from __future__ import annotations

import unittest

from ranked_array import DtypeFacade, Ndarray, RankedArray


class FacadeTests(unittest.TestCase):
    def test_quick_form_names_the_ranked_array_type(self) -> None:
        self.assertIs(Ndarray[int, 2], RankedArray[int, 2])
        self.assertIs(Ndarray[float, 1], RankedArray[float, 1])

    def test_dim_form(self) -> None:
        facade = Ndarray[int]
        self.assertIsInstance(facade, DtypeFacade)
        self.assertIs(facade.dim(3), RankedArray[int, 3])
        self.assertIs(facade[3], RankedArray[int, 3])
        self.assertEqual(Ndarray[int], DtypeFacade(int))

    def test_facade_types_keep_all_constructors(self) -> None:
        base = Ndarray[int].dim(1)([1, 2])
        self.assertEqual(Ndarray[int, 2](2, 2, 1).tolist(), [[1, 1], [1, 1]])
        self.assertEqual(Ndarray[int, 2]([[1], [2]]).tolist(), [[1], [2]])
        self.assertEqual(Ndarray[int, 2](base).tolist(), [[1, 2]])

    def test_facade_holds_no_instances(self) -> None:
        with self.assertRaises(TypeError):
            Ndarray()
        with self.assertRaises(TypeError):
            Ndarray[int, 2, 3]
        with self.assertRaises(ValueError):
            Ndarray[int].dim(0)


if __name__ == "__main__":
    unittest.main()
