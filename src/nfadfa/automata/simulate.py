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

from enum import Enum

from loguru import logger


class Acceptance(Enum):
    """
    Outcome of running a DFA over an input string.

    ``INVALID_ALPHABET`` and ``NO_TRANSITION`` tell malformed input and an
    incomplete transition function apart from a definite ``REJECTED``.
    """

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    INVALID_ALPHABET = "invalid_alphabet"
    NO_TRANSITION = "no_transition"

    def __bool__(self):
        return self is Acceptance.ACCEPTED


def simulate(dfa, string):
    """
    Walks ``dfa`` over ``string`` one symbol at a time from the start state.

    The walk halts with ``INVALID_ALPHABET`` at the first symbol outside the
    alphabet, and with ``NO_TRANSITION`` at the first symbol the current
    state has no transition for. Otherwise the result is ``ACCEPTED`` if the
    walk ends in a final state and ``REJECTED`` if it doesn't. The empty
    string is decided by the start state alone.

    Args:
        dfa (Dfa): The automaton to run.
        string (str): The input.

    Returns:
        Acceptance: The outcome.

    Example:
        >>> dfa = Dfa(["0", "1"], "ab", {"0": {"a": "1"}}, "0", ["1"])
        >>> simulate(dfa, "a")
        <Acceptance.ACCEPTED: 'accepted'>
        >>> simulate(dfa, "b")
        <Acceptance.NO_TRANSITION: 'no_transition'>
        >>> simulate(dfa, "c")
        <Acceptance.INVALID_ALPHABET: 'invalid_alphabet'>
    """
    alphabet = dfa.alphabet
    state = dfa.start_state

    for pos, label in enumerate(string):
        if label not in alphabet:
            logger.trace("{!r} at {} is not in the alphabet", label, pos)
            return Acceptance.INVALID_ALPHABET

        dest = dfa.next_state(state, label)
        if dest is None:
            logger.trace("No transition from {} on {!r} at {}", state, label, pos)
            return Acceptance.NO_TRANSITION

        logger.trace("{} -> {!r} -> {}", state, label, dest)
        state = dest

    if dfa.is_final(state):
        return Acceptance.ACCEPTED
    return Acceptance.REJECTED
