# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Project
from .adoption import AdoptionLink
from .awaiting import AwaitingLink
from .resolution import ResolutionLink
from .fulfillment import FulfillmentLink

__all__ = ("AdoptionLink", "AwaitingLink", "ResolutionLink", "FulfillmentLink")
