from __future__ import annotations

import os
from dataclasses import dataclass

from forall import Config
from gen import int_between, letters, list_of, list_of_length, map, record_of, tuple_of
from log_config import configure_logging
from reporting import check


@dataclass(frozen=True, order=True)
class Person:
    name: str
    age: int

    def __post_init__(self):
        if self.age < 0:
            raise ValueError(f"Age must be positive")

def sort_by_age(people: list[Person]) -> list[Person]:
    return sorted(people, key=lambda p: p.age)

def wrong_sort_by_age(people: list[Person]) -> list[Person]:
    # whoops, we forgot the key
    return sorted(people)

def is_valid(persons_in: list[Person], persons_out: list[Person]) -> bool:
    same_length = len(persons_in) == len(persons_out)
    sorted = all(persons_out[i].age <= persons_out[i + 1].age
                for i in range(len(persons_out)-1))
    unchanged = { p.name for p in persons_in } == { p.name for p in persons_out }
    return same_length and sorted and unchanged


ages = int_between(0, 100)
simple_names = map("".join, list_of_length(6, letters))
persons = record_of({"name": simple_names, "age": ages}, into=Person)
lists_of_person = list_of(persons)

numbers = int_between(1, 100)

def prop_rev_of_rev(xs: list[int]) -> bool:
    return list(reversed(list(reversed(xs)))) == xs

def prop_wrong_rev(xs: list[int]) -> bool:
    return list(reversed(xs)) == xs

def prop_wrong_less_than(pair: tuple[int, int]) -> bool:
    a, b = pair
    return a < b + 1

def prop_sort_by_age(persons_in: list[Person]) -> bool:
    return is_valid(persons_in, sort_by_age(persons_in))

def prop_wrong_sort_by_age(persons_in: list[Person]) -> bool:
    return is_valid(persons_in, wrong_sort_by_age(persons_in))


if __name__ == "__main__":
    configure_logging(level=os.environ.get("PBT_LOG_LEVEL", "WARNING"))
    config = Config.from_env()
    check(list_of(numbers), prop_rev_of_rev, config)
    check(list_of(numbers), prop_wrong_rev, config)
    check(tuple_of(numbers, numbers), prop_wrong_less_than, config)
    check(lists_of_person, prop_sort_by_age, config)
    check(lists_of_person, prop_wrong_sort_by_age, config)
