import pytest

from conclab.elim_stack.stack import ContentionError, Stack


class ListStack(Stack):
    def __init__(self, push_failures=0, pop_contentions=0):
        self.items = []
        self.push_failures = push_failures
        self.pop_contentions = pop_contentions
        self.push_attempts = 0
        self.pop_attempts = 0

    def try_push(self, request):
        self.push_attempts += 1
        if self.push_failures:
            self.push_failures -= 1
            return False
        self.items.append(request)
        return True

    def try_pop(self):
        self.pop_attempts += 1
        if self.pop_contentions:
            self.pop_contentions -= 1
            raise ContentionError
        if not self.items:
            raise IndexError("pop from empty stack")
        return self.items.pop()

    def is_empty(self):
        return not self.items


def test_stack_is_abstract():
    with pytest.raises(TypeError):
        Stack()


def test_push_retries_until_served():
    failures = 2
    stack = ListStack(push_failures=failures)
    Stack.push(stack, "item")
    assert stack.push_attempts == failures + 1
    assert stack.items == ["item"]


def test_pop_retries_on_contention():
    contentions = 4
    stack = ListStack(pop_contentions=contentions)
    Stack.push(stack, "item")
    assert Stack.pop(stack) == "item"
    assert stack.pop_attempts == contentions + 1
    assert stack.is_empty()


def test_pop_empty_raises_index_error():
    stack = ListStack(pop_contentions=1)
    with pytest.raises(IndexError):
        Stack.pop(stack)
    assert stack.pop_attempts == 2


def test_push_pop_round_trip_is_lifo():
    stack = ListStack()
    values = ["a", "b", "c"]
    for value in values:
        Stack.push(stack, value)
    assert [Stack.pop(stack) for _ in values] == list(reversed(values))