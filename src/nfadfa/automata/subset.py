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

from loguru import logger

from nfadfa.automata.closure import close_stateset, epsilon_closure
from nfadfa.automata.fsa import EPSILON, Dfa, is_deterministic, stateset_label


class MultiNfa:
    """
    Intermediate automaton whose states are sets of NFA states.

    It only exists while an NFA is being converted: :meth:`from_nfa` explores
    every set of states reachable from the start state and :meth:`to_dfa`
    relabels the result into a :class:`Dfa`.

    Attributes:
        start_state (frozenset): The EPSILON closure of the NFA start state.
        transitions (dict): Maps each processed state set to a dictionary of
            symbols and destination state sets.
        final_states (set): The processed state sets that contain at least
            one final state of the NFA.
        alphabet (frozenset): The NFA alphabet.
    """

    def __init__(self, start_state, transitions, final_states, alphabet):
        self.start_state = start_state
        self.transitions = transitions
        self.final_states = final_states
        self.alphabet = alphabet

    @property
    def states(self):
        return set(self.transitions)

    @classmethod
    def from_nfa(cls, nfa):
        """
        Runs the subset construction over ``nfa``.

        Each state set is processed at most once, which bounds the search to
        the power set of the NFA states. If any state of a set, as it was
        queued and before EPSILON expansion, has no entry at all in the NFA
        transition table, the whole closed set is recorded with no outgoing
        transitions. The start set is queued as the bare start state, so only
        the start state itself is checked there.
        """
        table = nfa.transitions
        start = epsilon_closure(nfa.start_state, table)

        transitions = {}
        frontier = [frozenset([nfa.start_state])]
        while frontier:
            queued = frontier.pop()
            current = close_stateset(queued, table)
            if current in transitions:
                continue

            missing = [state for state in queued if state not in table]
            if missing:
                logger.debug(
                    "No transitions recorded for {} ({} missing from the table)",
                    stateset_label(current),
                    stateset_label(missing),
                )
                transitions[current] = {}
                continue

            moves = {}
            for state in current:
                for label, dests in table.get(state, {}).items():
                    if label == EPSILON or not dests:
                        continue
                    moves.setdefault(label, set()).update(dests)

            trans = {
                label: close_stateset(dests, table) for label, dests in moves.items()
            }
            transitions[current] = trans
            logger.trace(
                "{} -> {}",
                stateset_label(current),
                {label: stateset_label(dest) for label, dest in sorted(trans.items())},
            )

            for dest in trans.values():
                if dest not in transitions:
                    frontier.append(dest)

        final_states = {ss for ss in transitions if nfa.is_final(ss)}
        return cls(start, transitions, final_states, nfa.alphabet)

    def to_dfa(self):
        """
        Relabels every state set with its canonical label and returns the
        equivalent :class:`Dfa`.
        """
        transitions = {
            stateset_label(src): {
                label: stateset_label(dest) for label, dest in trans.items()
            }
            for src, trans in self.transitions.items()
        }
        return Dfa(
            states=(stateset_label(ss) for ss in self.transitions),
            alphabet=self.alphabet,
            transitions=transitions,
            start_state=stateset_label(self.start_state),
            final_states=(stateset_label(ss) for ss in self.final_states),
        )


def relabel_dfa(nfa):
    """
    Copies an NFA that is already deterministic into a :class:`Dfa`,
    replacing each single-destination set with the destination itself.
    """
    transitions = {}
    for src, trans in nfa.transitions.items():
        table = transitions.setdefault(src, {})
        for label, dests in trans.items():
            for dest in dests:
                table[label] = dest
    return Dfa(
        states=nfa.states,
        alphabet=nfa.alphabet,
        transitions=transitions,
        start_state=nfa.start_state,
        final_states=nfa.final_states,
    )


def construct(nfa):
    """
    Converts an NFA into an equivalent DFA.

    For every input string the returned DFA accepts exactly when some run of
    the NFA, following EPSILON and symbol transitions from the start state,
    ends in a final state. The states of the DFA are labeled with the sorted,
    comma-joined names of the NFA states they stand for (for example
    ``"q0,q1"``).

    If the NFA is already deterministic its transition table is relabeled
    directly instead.

    Args:
        nfa (Nfa): The automaton to convert. It is not modified.

    Returns:
        Dfa: The converted automaton.

    Example:
        >>> nfa = Nfa(["q0", "q1"], "a", {"q0": {"a": ["q0", "q1"]}}, "q0", ["q1"])
        >>> dfa = construct(nfa)
        >>> dfa.start_state, sorted(dfa.final_states)
        ('q0', ['q0,q1'])
    """
    if is_deterministic(nfa):
        logger.debug("{!r} is already deterministic, relabeling", nfa)
        return relabel_dfa(nfa)

    multi = MultiNfa.from_nfa(nfa)
    logger.debug(
        "Subset construction of {!r} found {} state sets", nfa, len(multi.transitions)
    )
    return multi.to_dfa()
