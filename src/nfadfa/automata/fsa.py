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

import sys
from types import MappingProxyType

from cached_property import cached_property

# Reserved label for transitions that consume no input
EPSILON = "ε"

# Joins the sorted members of a state set into one DFA state label
STATESET_SEPARATOR = ","


class AlphabetError(ValueError):
    """
    Raised when an automaton is declared with an alphabet that contains the
    EPSILON label or a symbol that is not a single character.
    """


def stateset_label(stateset):
    """
    Returns the canonical label of a set of states.

    The members are sorted before they are joined, so two sets with the same
    membership always produce the same label regardless of the order in
    which they were built.

    Args:
        stateset (iterable): The states to label.

    Returns:
        str: The canonical label.

    Example:
        >>> stateset_label({"q2", "q0", "q1"})
        'q0,q1,q2'
    """
    return STATESET_SEPARATOR.join(sorted(stateset))


def check_alphabet(alphabet):
    alphabet = frozenset(alphabet)
    if EPSILON in alphabet:
        raise AlphabetError(f"{EPSILON!r} is reserved and can't be in the alphabet")
    for symbol in alphabet:
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise AlphabetError(f"Alphabet symbol {symbol!r} is not a single character")
    return alphabet


class Nfa:
    """
    Non-deterministic finite automaton.

    Each (state, symbol) pair maps to zero, one or many destination states,
    and the EPSILON label marks transitions taken without consuming input.

    The transition table is kept exactly as it was described: a state that
    has no outgoing transitions at all is simply absent from it.

    Attributes:
        states (frozenset): All declared states.
        alphabet (frozenset): The valid input symbols (never EPSILON).
        transitions (dict): Maps a source state to a dictionary of labels and
            sets of destination states. Change it through
            :meth:`add_transition`; editing the dictionary directly leaves a
            cached :attr:`is_deterministic` out of date.
        start_state (str): The initial state.
        final_states (set): The accepting states.
    """

    def __init__(
        self, states, alphabet, transitions=None, start_state=None, final_states=()
    ):
        """
        Initializes an NFA from an explicit description.

        Args:
            states (iterable): The state labels.
            alphabet (iterable): Single character input symbols.
            transitions (dict, optional): Maps state -> symbol -> list of
                destination states. Symbols may be EPSILON.
            start_state (str, optional): The initial state.
            final_states (iterable, optional): The accepting states.

        Raises:
            AlphabetError: If the alphabet contains EPSILON or a symbol that
                isn't a single character.
            TypeError: If a destination list is given as a bare string.
        """
        self.states = frozenset(states)
        self.alphabet = check_alphabet(alphabet)
        self.start_state = start_state
        self.final_states = set(final_states)
        self.transitions = {}
        for src, trans in (transitions or {}).items():
            table = self.transitions.setdefault(src, {})
            for label, dests in trans.items():
                if isinstance(dests, str):
                    raise TypeError(
                        f"Destinations of {src!r} on {label!r} must be a list "
                        f"of states, not {dests!r}"
                    )
                table[label] = set(dests)

    def __repr__(self):
        return f"<{type(self).__name__} {len(self.states)} states start={self.start_state!r}>"

    def add_transition(self, src, label, dest):
        """
        Adds a transition from the source state to the destination state with
        the specified label.

        Example:
            >>> nfa = Nfa(["s", "t"], "a", start_state="s")
            >>> nfa.add_transition("s", "a", "t")
            >>> nfa.add_transition("s", EPSILON, "t")
        """
        if label != EPSILON and label not in self.alphabet:
            check_alphabet([label])
            self.alphabet = self.alphabet | {label}
        self.transitions.setdefault(src, {}).setdefault(label, set()).add(dest)
        self.states = self.states | {src, dest}
        self.__dict__.pop("is_deterministic", None)

    def add_final_state(self, state):
        self.final_states.add(state)
        self.states = self.states | {state}

    def triples(self):
        """
        Yields every (source state, label, destination state) triple in the
        transition table.
        """
        for src, trans in self.transitions.items():
            for label, dests in trans.items():
                for dest in dests:
                    yield src, label, dest

    def is_final(self, states):
        """
        Returns True if any of the given states is a final state.
        """
        return not self.final_states.isdisjoint(states)

    @cached_property
    def is_deterministic(self):
        """
        True if no transition uses EPSILON and no (state, symbol) pair maps to
        more than one destination.
        """
        for trans in self.transitions.values():
            for label, dests in trans.items():
                if label == EPSILON or len(dests) > 1:
                    return False
        return True


def is_deterministic(nfa):
    """
    Returns True if the NFA can be relabeled into a DFA without running the
    subset construction.

    Args:
        nfa (Nfa): The automaton to check.

    Returns:
        bool: True if the automaton has no EPSILON transitions and no
        (state, symbol) pair with more than one destination.
    """
    return nfa.is_deterministic


class Dfa:
    """
    Deterministic finite automaton.

    Each (state, symbol) pair maps to at most one destination. A DFA is not
    modified after it is built: the state sets are frozen and the transition
    table is only exposed through read-only views, so one instance can be
    queried from several threads at once.

    The transition function may be partial. A missing (state, symbol) entry
    is reported by the simulator as a missing transition, it is never filled
    in with a default state.
    """

    def __init__(self, states, alphabet, transitions, start_state, final_states):
        self._states = frozenset(states)
        self._alphabet = frozenset(alphabet)
        self._start_state = start_state
        self._final_states = frozenset(final_states)
        self._transitions = MappingProxyType(
            {
                src: MappingProxyType(dict(trans))
                for src, trans in transitions.items()
            }
        )

    def __repr__(self):
        return f"<{type(self).__name__} {len(self._states)} states start={self._start_state!r}>"

    def __eq__(self, other):
        return (
            isinstance(other, Dfa)
            and self._start_state == other._start_state
            and self._states == other._states
            and self._alphabet == other._alphabet
            and self._final_states == other._final_states
            and self._transitions == other._transitions
        )

    def __hash__(self):
        return hash((self._start_state, self._states, self._final_states))

    @property
    def states(self):
        return self._states

    @property
    def alphabet(self):
        return self._alphabet

    @property
    def transitions(self):
        """
        Read-only mapping of source state to a read-only mapping of symbol to
        destination state.
        """
        return self._transitions

    @property
    def start_state(self):
        return self._start_state

    @property
    def final_states(self):
        return self._final_states

    @cached_property
    def all_labels(self):
        """
        The symbols used by at least one transition, sorted.
        """
        labels = set()
        for trans in self._transitions.values():
            labels.update(trans)
        return tuple(sorted(labels))

    def is_final(self, state):
        return state in self._final_states

    def next_state(self, src, label):
        """
        Returns the destination of the transition from ``src`` on ``label``,
        or None if there is no such transition.

        Example:
            >>> dfa = Dfa(["A", "B"], "a", {"A": {"a": "B"}}, "A", ["B"])
            >>> dfa.next_state("A", "a")
            'B'
            >>> dfa.next_state("B", "a") is None
            True
        """
        trans = self._transitions.get(src)
        if trans is None:
            return None
        return trans.get(label)

    def accepts(self, string):
        """
        Runs the DFA over ``string`` and returns an
        :class:`nfadfa.automata.simulate.Acceptance` outcome.
        """
        from nfadfa.automata.simulate import simulate

        return simulate(self, string)

    def reachable_from(self, src, inclusive=True):
        """
        Returns the set of states that can be reached from the specified
        source state by following zero or more transitions.

        Args:
            src (str): The source state.
            inclusive (bool, optional): Whether to include the source state
                itself. Defaults to True.

        Returns:
            set: The reachable states.
        """
        transitions = self._transitions
        reached = {src} if inclusive else set()
        stack = [src]
        seen = {src}
        while stack:
            state = stack.pop()
            for dest in transitions.get(state, {}).values():
                reached.add(dest)
                if dest not in seen:
                    seen.add(dest)
                    stack.append(dest)
        return reached

    def dump(self, stream=sys.stdout):
        """
        Prints a textual representation of the DFA to the specified stream.
        The start state is marked with ``@`` and final destinations with
        ``||``.

        Example:
            >>> dfa = Dfa(["0", "1"], "a", {"0": {"a": "1"}}, "0", ["1"])
            >>> dfa.dump()
            @ 0
               a -> 1||
              1||
        """
        for src in sorted(self._states):
            beg = "@" if src == self._start_state else " "
            end = "||" if self.is_final(src) else ""
            print(beg, src + end, file=stream)
            xs = self._transitions.get(src, {})
            for label in sorted(xs):
                dest = xs[label]
                end = "||" if self.is_final(dest) else ""
                print("  ", label, "->", dest + end, file=stream)
