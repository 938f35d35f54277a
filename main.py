import logging
from time import perf_counter, sleep

import combinators
import functions
import number
from cancel import with_cancel, with_timeout
from iterator import Chan, Func, Slice, send, wait_for_next
from optional import Err, Nothing, Ok, Some
from pipeline import Pipeline
from utils import setup_logging

setup_logging("INFO")
logger = logging.getLogger("functional.demo")


def slow_counter(limit):
    # Simulate a costly source so the eager evaluation is visible
    state = {"n": 0}

    def produce():
        if state["n"] >= limit:
            return Nothing()
        state["n"] += 1
        print(f"  producing {state['n']} ...")
        sleep(0.05)
        return Some(state["n"])

    return Func(produce)


print("\n--- Demo: options and results ---")
print(f"Some(42) -> {Some(42)}, Nothing() -> {Nothing()}")
print(f"Ok(3.5) -> {Ok(3.5)}, Err(ValueError('bad input')) -> {Err(ValueError('bad input'))}")

print("\n--- Demo: eager map/filter (source drained at call time) ---")
source = slow_counter(6)
t0 = perf_counter()
evens = combinators.filter(source, lambda v: v % 2 == 0)
t1 = perf_counter()
print(f"filter() returned after {t1 - t0:.2f}s; source left: {source.next()}")
print(f"Squares of evens: {combinators.collect(number.square(evens))}")

print("\n--- Demo: reductions ---")
print(f"Reduce([0..5], +) = {combinators.reduce(Slice(range(6)), lambda acc, x: acc + x)}")
print(f"DotProduct([6,-2,-1], [2,10,2]) = {number.dot_product(Slice([6, -2, -1]), Slice([2, 10, 2]))}")
halve, square, add_one = (lambda x: x // 2), (lambda x: x * x), (lambda x: x + 1)
print(f"chain(halve, square, add_one)(5) = {functions.chain(halve, square, add_one)(5)}")

print("\n--- Demo: sorting ---")
once = combinators.sort(Slice([9, 102, 41, 14, 0]), stable=False)
twice = combinators.sort(once, stable=False)
print(f"Sorted: {list(twice)} (second sort short-circuited: {once is twice})")

print("\n--- Demo: collecting onto a channel from a background thread ---")
ch = combinators.collect_to_chan(slow_counter(4))
for value in ch:
    print(f"  received {value}")
print(f"Channel closed: {ch.closed}")

print("\n--- Demo: cancellable waits ---")
pending = send()  # nothing is ever sent on it
token, cancel = with_timeout(0.2)
t0 = perf_counter()
print(f"wait_for_next on an idle channel: {wait_for_next(token, Chan(pending))} after {perf_counter() - t0:.2f}s")
cancel()

token, cancel = with_cancel()
forever = Func(lambda: Some("tick"))
tick, _ = combinators.collect_to_chan(forever, token).receive()
cancel()
print(f"First tick from an endless source: {tick}")

print("\n--- Demo: fluent pipeline ---")
total = Pipeline(range(1, 11)).filter(lambda x: x % 3 == 0).multiply(10).sum()
print(f"Sum of multiples of 3 in 1..10, times 10: {total}")

logger.info("Demo finished")
