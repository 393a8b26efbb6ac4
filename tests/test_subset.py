import copy
from itertools import product

import pytest
from nfadfa.automata import (
    EPSILON,
    Acceptance,
    MultiNfa,
    Nfa,
    construct,
    simulate,
)


def nfa_accepts(nfa, string):
    # Straightforward set-of-states run, used as the reference semantics
    def expand(states):
        states = set(states)
        frontier = list(states)
        while frontier:
            for dest in nfa.transitions.get(frontier.pop(), {}).get(EPSILON, ()):
                if dest not in states:
                    states.add(dest)
                    frontier.append(dest)
        return states

    current = expand({nfa.start_state})
    for label in string:
        moved = set()
        for state in current:
            moved.update(nfa.transitions.get(state, {}).get(label, ()))
        current = expand(moved)
    return nfa.is_final(current)


def all_strings(alphabet, maxlen):
    for length in range(maxlen + 1):
        for chars in product(sorted(alphabet), repeat=length):
            yield "".join(chars)


def nth_from_last_nfa(n):
    # Accepts strings over {a, b} whose n-th symbol from the end is "a"
    transitions = {"q0": {"a": ["q0", "q1"], "b": ["q0"]}}
    for i in range(1, n):
        transitions[f"q{i}"] = {"a": [f"q{i + 1}"], "b": [f"q{i + 1}"]}
    transitions[f"q{n}"] = {}
    states = [f"q{i}" for i in range(n + 1)]
    return Nfa(states, "ab", transitions, "q0", [f"q{n}"])


def epsilon_cycle_nfa():
    return Nfa(
        states=["s", "t", "u", "v"],
        alphabet="xy",
        transitions={
            "s": {EPSILON: ["t"], "x": ["s"]},
            "t": {EPSILON: ["u"], "y": ["v"]},
            "u": {EPSILON: ["s"], "x": ["v", "t"]},
            "v": {EPSILON: ["v"], "y": ["u"]},
        },
        start_state="s",
        final_states=["v"],
    )


def test_scenario_b(nfa_b):
    dfa = construct(nfa_b)
    assert dfa.start_state == "q0,q1"
    assert dfa.states == {
        "q1",
        "q2",
        "q3",
        "q0,q1",
        "q1,q2",
        "q1,q3",
        "q2,q3",
        "q0,q1,q2",
    }
    assert dfa.final_states == {"q0,q1", "q0,q1,q2"}
    assert dfa.alphabet == {"a", "b"}

    expected = {
        "q1": {"a": "q1,q2", "b": "q2"},
        "q2": {"a": "q0,q1,q2", "b": "q3"},
        "q3": {"b": "q1"},
        "q0,q1": {"a": "q1,q2", "b": "q2"},
        "q1,q2": {"a": "q0,q1,q2", "b": "q2,q3"},
        "q1,q3": {"a": "q1,q2", "b": "q1,q2"},
        "q2,q3": {"a": "q0,q1,q2", "b": "q1,q3"},
        "q0,q1,q2": {"a": "q0,q1,q2", "b": "q2,q3"},
    }
    assert {src: dict(trans) for src, trans in dfa.transitions.items()} == expected


def test_scenario_b_acceptance(nfa_b):
    dfa = construct(nfa_b)
    assert simulate(dfa, "") is Acceptance.ACCEPTED
    assert simulate(dfa, "a") is Acceptance.REJECTED
    assert simulate(dfa, "aa") is Acceptance.ACCEPTED
    assert simulate(dfa, "ba") is Acceptance.ACCEPTED
    assert simulate(dfa, "b") is Acceptance.REJECTED
    assert simulate(dfa, "bbb") is Acceptance.REJECTED
    assert simulate(dfa, "bba") is Acceptance.NO_TRANSITION
    assert simulate(dfa, "abc") is Acceptance.INVALID_ALPHABET


def test_partial_transitions_preserved(nfa_b):
    dfa = construct(nfa_b)
    # q3 only has a transition on "b", so the DFA state doesn't get one on "a"
    assert "a" not in dfa.transitions["q3"]
    assert dfa.next_state("q3", "a") is None


def test_fast_path(nfa_a):
    dfa = construct(nfa_a)
    assert dfa.states == {"q1", "q2", "q3"}
    assert {src: dict(trans) for src, trans in dfa.transitions.items()} == {
        "q1": {"0": "q1", "1": "q2"},
        "q2": {"0": "q3", "1": "q2"},
        "q3": {"0": "q2", "1": "q2"},
    }


def test_fast_path_matches_subset_construction(nfa_a):
    fast = construct(nfa_a)
    general = MultiNfa.from_nfa(nfa_a).to_dfa()
    for string in all_strings(nfa_a.alphabet, 7):
        assert simulate(fast, string) == simulate(general, string)


def test_fast_path_with_unreachable_state():
    nfa = Nfa(
        ["s", "t", "dead"],
        "ab",
        {"s": {"a": ["t"]}, "t": {"b": ["s"]}, "dead": {"a": ["s"]}},
        "s",
        ["t"],
    )
    fast = construct(nfa)
    general = MultiNfa.from_nfa(nfa).to_dfa()
    assert "dead" in fast.states
    assert "dead" not in general.states
    for string in all_strings(nfa.alphabet, 6):
        assert simulate(fast, string) == simulate(general, string)


@pytest.mark.parametrize(
    "make_nfa",
    [epsilon_cycle_nfa, lambda: nth_from_last_nfa(3), lambda: nth_from_last_nfa(1)],
)
def test_language_equivalence(make_nfa):
    nfa = make_nfa()
    dfa = construct(nfa)
    for string in all_strings(nfa.alphabet, 7):
        accepted = simulate(dfa, string) is Acceptance.ACCEPTED
        assert accepted == nfa_accepts(nfa, string), string


def test_language_equivalence_scenario_b(nfa_b):
    dfa = construct(nfa_b)
    for string in all_strings(nfa_b.alphabet, 8):
        accepted = simulate(dfa, string) is Acceptance.ACCEPTED
        assert accepted == nfa_accepts(nfa_b, string), string


def test_state_count_bound():
    for n in range(1, 6):
        nfa = nth_from_last_nfa(n)
        multi = MultiNfa.from_nfa(nfa)
        assert len(multi.states) <= 2 ** len(nfa.states)
        # Every subset of {q1..qn} together with q0 is reachable
        assert len(multi.states) == 2**n
        assert len(construct(nfa).states) == 2**n


def test_each_stateset_processed_once(log_messages):
    nfa = nth_from_last_nfa(3)
    construct(nfa)
    processed = [m for m in log_messages if " -> {" in m]
    assert len(processed) == 8
    assert len(set(processed)) == 8


def test_start_closure():
    nfa = Nfa(
        ["s", "t", "u"],
        "a",
        {"s": {EPSILON: ["t"]}, "t": {EPSILON: ["u"]}, "u": {"a": ["s"]}},
        "s",
        ["u"],
    )
    dfa = construct(nfa)
    assert dfa.start_state == "s,t,u"
    assert dfa.final_states == {"s,t,u"}
    assert dfa.transitions["s,t,u"] == {"a": "s,t,u"}
    assert simulate(dfa, "") is Acceptance.ACCEPTED
    assert simulate(dfa, "aaaa") is Acceptance.ACCEPTED


def test_member_missing_from_table():
    nfa = Nfa(
        ["q0", "q1", "q2"],
        "ab",
        {"q0": {"a": ["q1", "q2"], EPSILON: ["q0"]}, "q1": {"b": ["q2"]}},
        "q0",
        ["q2"],
    )
    dfa = construct(nfa)
    # q2 has no entry at all, so "q1,q2" gets no transitions even though q1
    # has one on "b"
    assert "q1,q2" in dfa.states
    assert "q1,q2" in dfa.final_states
    assert dict(dfa.transitions["q1,q2"]) == {}
    assert simulate(dfa, "a") is Acceptance.ACCEPTED
    assert simulate(dfa, "ab") is Acceptance.NO_TRANSITION
    assert nfa_accepts(nfa, "ab")


def test_member_with_empty_entry():
    nfa = Nfa(
        ["q0", "q1", "q2"],
        "ab",
        {"q0": {"a": ["q1", "q2"], EPSILON: ["q0"]}, "q1": {"b": ["q2"]}, "q2": {}},
        "q0",
        ["q2"],
    )
    dfa = construct(nfa)
    assert dict(dfa.transitions["q1,q2"]) == {"b": "q2"}
    assert dict(dfa.transitions["q2"]) == {}
    assert simulate(dfa, "ab") is Acceptance.ACCEPTED


def test_missing_member_in_start_closure():
    nfa = Nfa(
        ["s", "t"],
        "a",
        {"s": {EPSILON: ["t"], "a": ["s"]}},
        "s",
        ["t"],
    )
    dfa = construct(nfa)
    # Only the start state itself is checked, not the states its EPSILON
    # transitions add
    assert dfa.states == {"s,t"}
    assert dfa.final_states == {"s,t"}
    assert dict(dfa.transitions["s,t"]) == {"a": "s,t"}
    assert simulate(dfa, "") is Acceptance.ACCEPTED
    assert simulate(dfa, "aaa") is Acceptance.ACCEPTED


def test_missing_member_reached_from_start():
    nfa = Nfa(
        ["q0", "qf", "x"],
        "a",
        {"q0": {EPSILON: ["qf"], "a": ["q0", "x"]}, "x": {}},
        "q0",
        ["qf"],
    )
    dfa = construct(nfa)
    assert dfa.start_state == "q0,qf"
    assert dict(dfa.transitions["q0,qf"]) == {"a": "q0,qf,x"}
    # qf has no entry, so the set reached on "a" gets no transitions
    assert dict(dfa.transitions["q0,qf,x"]) == {}
    assert simulate(dfa, "a") is Acceptance.ACCEPTED
    assert simulate(dfa, "aa") is Acceptance.NO_TRANSITION
    assert nfa_accepts(nfa, "a")


def test_missing_member_logged(log_messages):
    nfa = Nfa(["s", "t"], "a", {"s": {EPSILON: ["s"], "a": ["t"]}}, "s", ["t"])
    construct(nfa)
    assert any("No transitions recorded for t (t missing" in m for m in log_messages)


def test_empty_destinations():
    nfa = Nfa(
        ["s", "t"],
        "ab",
        {"s": {EPSILON: ["t"], "a": []}, "t": {"b": ["t"]}},
        "s",
        ["t"],
    )
    dfa = construct(nfa)
    assert dict(dfa.transitions["s,t"]) == {"b": "t"}
    assert simulate(dfa, "a") is Acceptance.NO_TRANSITION


def test_nfa_not_modified(nfa_b):
    before = copy.deepcopy(nfa_b.transitions)
    construct(nfa_b)
    assert nfa_b.transitions == before
    assert nfa_b.final_states == {"q0"}


def test_canonical_labels_independent_of_order():
    table = {
        "q0": {"a": ["q3", "q1", "q2"]},
        "q1": {"b": ["q0"]},
        "q2": {"b": ["q0"]},
        "q3": {"b": ["q0"]},
    }
    reordered = {state: table[state] for state in reversed(list(table))}
    reordered["q0"] = {"a": ["q2", "q1", "q3"]}

    first = construct(Nfa(["q0", "q1", "q2", "q3"], "ab", table, "q0", ["q3"]))
    second = construct(Nfa(["q3", "q2", "q1", "q0"], "ba", reordered, "q0", ["q3"]))
    assert first == second
    assert first.transitions["q0"]["a"] == "q1,q2,q3"


def test_path_logging(nfa_a, nfa_b, log_messages):
    construct(nfa_a)
    construct(nfa_b)
    assert any("already deterministic" in m for m in log_messages)
    assert any("found 8 state sets" in m for m in log_messages)
