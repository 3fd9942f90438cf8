from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from .content_types import is_text_type
from .models import OriginOutcome, Success

if TYPE_CHECKING:
    from .manifest import Manifest
    from .models import AssetRequest

LOG = logging.getLogger("asset_proxy.rewrite")


def maybe_rewrite(
    outcome: OriginOutcome, request: AssetRequest, manifest: Manifest
) -> OriginOutcome:
    """Swap asset directives in text bodies for fingerprinted keys.

    Returns ``outcome`` itself when nothing applies, otherwise a new
    :class:`Success` with a new body.
    """
    if not isinstance(outcome, Success) or not is_text_type(outcome.content_type):
        return outcome

    try:
        text = outcome.body.decode("utf-8")
    except UnicodeDecodeError:
        LOG.debug("skipping rewrite of non-utf-8 body for %s", request.key)
        return outcome

    rewritten = manifest.interpolate(text, outcome.content_type)
    if rewritten == text:
        return outcome

    LOG.debug("rewrote asset directives in %s", request.key)
    return replace(outcome, body=rewritten.encode("utf-8"))
