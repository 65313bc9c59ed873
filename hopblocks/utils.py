"""Helper classes and functions used among the code."""
import time
import unittest
from collections import defaultdict
from io import StringIO
from unittest.mock import patch
from typing import Any, Callable, List

import numpy as np
from scipy.sparse import csr_matrix


__all__ = ["Timer", "TestHelper", "print_banner_line"]


class Timer:
    """
    Class for recording the time usage of function calls within programs.

    Attributes
    ----------
    _start_time: Dict[str, float]
        time of last self.tic() call
    _total_time: Dict[str, float]
        overall time usage
    """
    def __init__(self) -> None:
        self._start_time = {}
        self._total_time = defaultdict(float)

    def tic(self, slot: str) -> None:
        """
        Begin tracking time usage and store it in a slot.

        :param slot: name of the slot
        :return: None
        """
        self._start_time[slot] = time.time()

    def toc(self, slot: str) -> None:
        """
        Stop tracking time usage and add it to a slot.

        :param slot: name of the slot
        :return: None
        :raises RuntimeError: if the slot has not been started
        """
        try:
            start_time = self._start_time.pop(slot)
        except KeyError:
            raise RuntimeError(f"Record for slot '{slot}' not started")
        self._total_time[slot] += (time.time() - start_time)

    def get_total_time(self, slot: str) -> float:
        """
        Get overall time usage of a slot.

        :param slot: name of the slot
        :return: time usage in seconds, 0 for unknown slots
        """
        return self._total_time.get(slot, 0.0)

    def report_total_time(self) -> None:
        """
        Report overall time usage and reset all the slots.

        :return: None
        """
        if len(self._total_time) > 0:
            max_len = max([len(slot) for slot in self._total_time.keys()])
            for slot, duration in self._total_time.items():
                print("\t", f"{slot:<{max_len}} : {duration:10.5f}")
        self._start_time = {}
        self._total_time = defaultdict(float)


class TestHelper:
    """
    Helper class that makes unittest easier.

    Attributes
    ----------
    _tester: 'unittest.TestCase' instance
        testcase upon which tests are performed
    """
    def __init__(self, tester: unittest.TestCase) -> None:
        """
        :param tester: testcase upon which tests are performed
        """
        self._tester = tester

    def test_equal_array(self, array1: np.ndarray,
                         array2: np.ndarray) -> None:
        """
        Checks if two arrays have the same shape and elements.

        :param array1: 1st array to compare
        :param array2: 2nd array to compare
        :return: None.
        """
        array1, array2 = np.asarray(array1), np.asarray(array2)
        self._tester.assertEqual(array1.shape, array2.shape)
        self._tester.assertTrue(np.array_equal(array1, array2),
                                f"{array1} != {array2}")

    def test_equal_csr(self, csr: csr_matrix,
                       indptr: List[int],
                       indices: List[int],
                       data: List[int]) -> None:
        """
        Checks if the raw arrays of a CSR matrix equal to references, without
        any canonicalization.

        :param csr: matrix to check
        :param indptr: reference row pointers
        :param indices: reference column indices
        :param data: reference data
        :return: None
        """
        self.test_equal_array(csr.indptr, indptr)
        self.test_equal_array(csr.indices, indices)
        self.test_equal_array(csr.data, data)

    def test_raise(self, func: Callable, exception: Any, message: str) -> None:
        """
        Tests if expected exception is raised during an operation.

        :param func: wrapper function over the operation to test
        :param exception: category of exception to test
        :param message: expected exception message
        :return: None
        """
        with self._tester.assertRaises(exception) as cm:
            func()
        if message is not None:
            self._tester.assertRegex(str(cm.exception), message)

    def test_stdout(self, func: Callable, message: List[str]) -> None:
        """
        Test if the output contain given message.

        :param func: wrapper function over the operation to test
        :param message: reference message with which to compare, each regex
            corresponds to one line of output
        :return: None
        """
        with patch('sys.stdout', new=StringIO()) as fake_out:
            func()
        output = [out for out in fake_out.getvalue().split("\n") if out != ""]
        self._tester.assertGreaterEqual(len(output), len(message))
        for i, msg in enumerate(message):
            self._tester.assertRegex(output[i], msg)


def print_banner_line(text: str,
                      width: int = 80,
                      mark: str = "-",
                      end: str = "#") -> None:
    """
    Print a banner like '#--------------- FOO ---------------#' to stdout.

    :param text: central text in the banner
    :param width: total width of the banner
    :param mark: border character of the banner
    :param end: end character prepended and appended to the banner
    :return: None
    """
    num_marks_total = width - len(text) - 4
    num_marks_left = num_marks_total // 2
    num_marks_right = num_marks_total - num_marks_left
    banner_with_marks = end + mark * num_marks_left
    banner_with_marks += f" {text} "
    banner_with_marks += mark * num_marks_right + end
    print(banner_with_marks)
