# Copyright 2024 Matt Chaput. All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
#    1. Redistributions of source code must retain the above copyright notice,
#       this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in the
#       documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY MATT CHAPUT ``AS IS'' AND ANY EXPRESS OR
# IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF
# MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO
# EVENT SHALL MATT CHAPUT OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
# LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA,
# OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING
# NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#
# The views and conclusions contained in the software and documentation are
# those of the authors and should not be interpreted as representing official
# policies, either expressed or implied, of Matt Chaput.

"""
Reads and writes the JSON description of an automaton.

A description looks like this::

    {
        "states": ["q0", "q1", "q2"],
        "alphabet": ["a", "b"],
        "start_state": "q0",
        "final_states": ["q2"],
        "state_transitions": {
            "q0": {"ε": ["q1"]},
            "q1": {"a": ["q1", "q2"], "b": ["q2"]}
        }
    }

Destinations are normally lists. The older single destination form
(``"a": "q2"``) is also accepted and normalized to a one item list before
the automaton is built.
"""

import json

from nfadfa.automata.fsa import EPSILON, AlphabetError, Nfa
from nfadfa.automata.subset import construct

# Spellings of the EPSILON label accepted in transition tables
EPSILON_KEYS = frozenset([EPSILON, "", "eps", "epsilon"])

_REQUIRED = ("states", "alphabet", "start_state", "final_states")


class DescriptionError(Exception):
    """
    Raised when an automaton description can't be decoded or doesn't
    describe a well formed automaton.
    """


def _string_list(data, key):
    value = data[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise DescriptionError(f"{key!r} must be a list of strings")
    return value


def _normalize_transitions(raw, states, alphabet):
    if not isinstance(raw, dict):
        raise DescriptionError("'state_transitions' must be an object")

    transitions = {}
    for src, trans in raw.items():
        if src not in states:
            raise DescriptionError(f"Transition source {src!r} is not a declared state")
        if not isinstance(trans, dict):
            raise DescriptionError(f"Transitions of {src!r} must be an object")

        table = transitions[src] = {}
        for label, dests in trans.items():
            if label in EPSILON_KEYS:
                label = EPSILON
            elif label not in alphabet:
                raise DescriptionError(
                    f"Symbol {label!r} of state {src!r} is not in the alphabet"
                )

            # Older descriptions give a single destination without a list
            if isinstance(dests, str):
                dests = [dests]
            if not isinstance(dests, list):
                raise DescriptionError(
                    f"Destinations of {src!r} on {label!r} must be a list or a string"
                )
            for dest in dests:
                if not isinstance(dest, str):
                    raise DescriptionError(
                        f"Destination {dest!r} of {src!r} on {label!r} must be a string"
                    )
                if dest not in states:
                    raise DescriptionError(
                        f"Destination {dest!r} of {src!r} on {label!r} is not a declared state"
                    )
            table.setdefault(label, []).extend(dests)
    return transitions


def nfa_from_dict(data):
    """
    Builds an :class:`Nfa` from a decoded description.

    Args:
        data (dict): The description.

    Returns:
        Nfa: The automaton.

    Raises:
        DescriptionError: If a key is missing or has the wrong type, if a
            state or symbol is used without being declared, or if the
            alphabet is invalid.
    """
    if not isinstance(data, dict):
        raise DescriptionError("An automaton description must be an object")
    for key in _REQUIRED:
        if key not in data:
            raise DescriptionError(f"Description is missing {key!r}")

    states = set(_string_list(data, "states"))
    alphabet = _string_list(data, "alphabet")
    final_states = _string_list(data, "final_states")

    start_state = data["start_state"]
    if not isinstance(start_state, str):
        raise DescriptionError("'start_state' must be a string")
    if start_state not in states:
        raise DescriptionError(f"Start state {start_state!r} is not a declared state")
    for state in final_states:
        if state not in states:
            raise DescriptionError(f"Final state {state!r} is not a declared state")

    transitions = _normalize_transitions(
        data.get("state_transitions", {}), states, set(alphabet)
    )

    try:
        return Nfa(states, alphabet, transitions, start_state, final_states)
    except AlphabetError as e:
        raise DescriptionError(str(e)) from e


def nfa_from_json(text):
    """
    Decodes a JSON description into an :class:`Nfa`.
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        raise DescriptionError(f"Invalid JSON: {e}") from e
    return nfa_from_dict(data)


def dfa_from_json(text):
    """
    Decodes a JSON description and converts it into a DFA.
    """
    return construct(nfa_from_json(text))


def dfa_to_dict(dfa):
    """
    Encodes a DFA as a description. Lists are sorted and each transition
    names its single destination directly.
    """
    return {
        "states": sorted(dfa.states),
        "alphabet": sorted(dfa.alphabet),
        "start_state": dfa.start_state,
        "final_states": sorted(dfa.final_states),
        "state_transitions": {
            src: {label: trans[label] for label in sorted(trans)}
            for src, trans in sorted(dfa.transitions.items())
        },
    }


def dfa_to_json(dfa, indent=None):
    return json.dumps(dfa_to_dict(dfa), ensure_ascii=False, indent=indent)
