import threading

from unittest.mock import call

import pytest

from managed_wait import MINIMAL_IMPLICIT_TIMEOUT, ImplicitlyWait, ReentrancyCounter


class TestReentrancyCounter:

    def test_increment_and_decrement_return_new_value(self):
        counter = ReentrancyCounter()

        assert counter.increment() == 1
        assert counter.increment() == 2
        assert counter.decrement() == 1
        assert counter.decrement() == 0
        assert counter.value == 0

    def test_starts_from_given_value(self):
        assert ReentrancyCounter(1).increment() == 2

    def test_unbalanced_decrement_raises(self):
        counter = ReentrancyCounter()

        with pytest.raises(RuntimeError):
            counter.decrement()

        assert counter.value == 0


class TestImplicitlyWait:

    @pytest.mark.parametrize('depth', [1, 2, 5])
    def test_no_timeout_never_touches_driver(self, driver, depth):
        implicitly_wait = ImplicitlyWait(driver, None)

        for _ in range(depth):
            implicitly_wait.disable()
        for _ in range(depth):
            implicitly_wait.enable()

        driver.implicitly_wait.assert_not_called()
        assert implicitly_wait.counter.value == 0

    @pytest.mark.parametrize('depth', [1, 2, 5])
    def test_nested_suspensions_touch_driver_once(self, driver, depth):
        implicitly_wait = ImplicitlyWait(driver, 30)

        for _ in range(depth):
            implicitly_wait.disable()
        assert driver.implicitly_wait.call_args_list == [call(MINIMAL_IMPLICIT_TIMEOUT)]
        assert implicitly_wait.counter.value == depth

        for _ in range(depth - 1):
            implicitly_wait.enable()
        assert driver.implicitly_wait.call_count == 1

        implicitly_wait.enable()
        assert driver.implicitly_wait.call_args_list == [call(MINIMAL_IMPLICIT_TIMEOUT), call(30)]
        assert implicitly_wait.counter.value == 0

    def test_ignore_restores_on_exception(self, driver):
        implicitly_wait = ImplicitlyWait(driver, 10)

        with pytest.raises(ValueError):
            with implicitly_wait.ignore():
                assert driver.implicitly_wait.call_args_list == [call(MINIMAL_IMPLICIT_TIMEOUT)]
                raise ValueError('fallo')

        assert driver.implicitly_wait.call_args_list == [call(MINIMAL_IMPLICIT_TIMEOUT), call(10)]
        assert implicitly_wait.counter.value == 0

    def test_shared_counter_keeps_outer_scope(self, driver, counter):
        outer = ImplicitlyWait(driver, 30, counter)
        inner = ImplicitlyWait(driver, 30, counter)

        with outer.ignore():
            with inner.ignore():
                pass
            assert driver.implicitly_wait.call_args_list == [call(MINIMAL_IMPLICIT_TIMEOUT)]

        assert driver.implicitly_wait.call_args_list == [call(MINIMAL_IMPLICIT_TIMEOUT), call(30)]

    def test_failed_disable_rolls_back_counter(self, driver):
        driver.implicitly_wait.side_effect = ConnectionError('sesión cerrada')
        implicitly_wait = ImplicitlyWait(driver, 30)

        with pytest.raises(ConnectionError):
            with implicitly_wait.ignore():
                pytest.fail('el bloque no debería ejecutarse')

        assert implicitly_wait.counter.value == 0
        assert driver.implicitly_wait.call_args_list == [call(MINIMAL_IMPLICIT_TIMEOUT)]


def test_counter_is_consistent_across_threads():
    counter = ReentrancyCounter()

    def work():
        for _ in range(1000):
            counter.increment()
            counter.decrement()
        counter.increment()

    threads = [threading.Thread(target=work) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert counter.value == 8
