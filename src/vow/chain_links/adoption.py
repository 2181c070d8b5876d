# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T

# Project
from ..abstract import State, AbstractLink, AbstractPromise

if T.TYPE_CHECKING:
    from ..chain_link import ChainLink


class AdoptionLink(AbstractLink):
    """Settles a claimed promise exactly like the promise it adopted.

    Progress updates of the adopted promise are forwarded as well.
    """

    __slots__ = ("adopter",)

    def __init__(self, adopter: "ChainLink[T.Any]") -> None:
        self.adopter = adopter

    def settled(self, source: AbstractPromise[T.Any]) -> None:
        # The adopter is already claimed, settle it directly
        if source.state is State.RESOLVED:
            self.adopter._settle(State.RESOLVED, source.value)
        else:
            self.adopter._settle(State.REJECTED, source.reason)

    def notify(self, update: T.Any) -> None:
        self.adopter._notify(update)


__all__ = ("AdoptionLink",)
