"""Post-checkout submodule synchronization."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from treeswitch.context import TreeswitchContext
from treeswitch.gateway.submodules.types import SubmoduleError, SubmodulesUpdated
from treeswitch.types import Repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmoduleCascadeSkipped:
    """The cascade did not run because recurse_submodules is disabled."""


def run_submodule_cascade_if_enabled(
    ctx: TreeswitchContext, repository: Repository
) -> SubmodulesUpdated | SubmoduleCascadeSkipped | SubmoduleError:
    """Update submodules after a checkout when the feature is enabled.

    The submodule gateway's result is returned unchanged, so a failure here
    becomes the failure of the whole checkout.
    """
    if not ctx.global_config.recurse_submodules:
        return SubmoduleCascadeSkipped()

    logger.debug("Updating submodules in %s", repository.path)
    return ctx.submodules.init_and_update(repository.path)
