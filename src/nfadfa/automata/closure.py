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

from nfadfa.automata.fsa import EPSILON


def epsilon_closure(state, transitions, closure=None):
    """
    Returns the smallest set of states that contains ``state`` and is closed
    under EPSILON transitions.

    A state's EPSILON destinations are only explored the first time the state
    is added to the closure, so cycles of EPSILON transitions terminate. A
    state with no entry in ``transitions``, or with no EPSILON entry,
    contributes nothing beyond itself.

    Args:
        state (str): The state to expand.
        transitions (dict): The NFA transition table, state -> label -> set
            of destination states.
        closure (set, optional): A partial closure to extend in place. States
            already in it are not explored again.

    Returns:
        frozenset: The closure.

    Example:
        >>> table = {"q0": {EPSILON: {"q1"}}, "q1": {EPSILON: {"q0"}}}
        >>> sorted(epsilon_closure("q0", table))
        ['q0', 'q1']
    """
    closure = set() if closure is None else closure
    if state in closure:
        return frozenset(closure)

    closure.add(state)
    frontier = [state]
    while frontier:
        src = frontier.pop()
        for dest in transitions.get(src, {}).get(EPSILON, ()):
            if dest not in closure:
                closure.add(dest)
                frontier.append(dest)
    return frozenset(closure)


def close_stateset(states, transitions):
    """
    Merges the EPSILON closure of every member of ``states``, so a set that
    was not closed yet can be used as a DFA state.
    """
    closure = set()
    for state in states:
        epsilon_closure(state, transitions, closure)
    return frozenset(closure)
