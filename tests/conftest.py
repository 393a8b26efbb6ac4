import pytest
from loguru import logger
from nfadfa.automata import EPSILON, Nfa


@pytest.fixture
def log_messages():
    messages = []
    logger.enable("nfadfa")
    handler_id = logger.add(messages.append, level="TRACE", format="{message}")
    yield messages
    logger.remove(handler_id)
    logger.disable("nfadfa")


@pytest.fixture
def nfa_a():
    # Deterministic: ends in q2 after a 1, or after an even number of 0s
    return Nfa(
        states=["q1", "q2", "q3"],
        alphabet=["0", "1"],
        transitions={
            "q1": {"0": ["q1"], "1": ["q2"]},
            "q2": {"0": ["q3"], "1": ["q2"]},
            "q3": {"0": ["q2"], "1": ["q2"]},
        },
        start_state="q1",
        final_states=["q2"],
    )


@pytest.fixture
def nfa_b():
    return Nfa(
        states=["q0", "q1", "q2", "q3"],
        alphabet=["a", "b"],
        transitions={
            "q0": {EPSILON: ["q1"]},
            "q1": {"a": ["q1", "q2"], "b": ["q2"]},
            "q2": {"a": ["q0", "q2"], "b": ["q3"]},
            "q3": {"b": ["q1"]},
        },
        start_state="q0",
        final_states=["q0"],
    )
