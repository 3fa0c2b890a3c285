from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from launchpad.core.exceptions import LaunchpadError, classify_error
from launchpad.core.launchpad_service import LaunchpadService
from launchpad.core.structures.structures import DeploymentRequest, DeploymentResult, PoolResult
from launchpad.core.wizard.report import render_deployment_failure, render_launch_report
from launchpad.core.wizard.steps import WizardState, next_step, render_prompt
from launchpad.logging.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class WizardOutcome:
    """
    Response to one wizard invocation.

    `state` is the step being asked for, or COMPLETE/FAILED once a deployment was attempted.
    """
    state: WizardState
    message: str
    deployment: Optional[DeploymentResult] = None
    pool: Optional[PoolResult] = None


def _classify(exc: Exception) -> LaunchpadError:
    if not isinstance(exc, LaunchpadError):
        log.debug("[WIZARD] Unclassified failure", exc_info=exc)
    return classify_error(exc)


def next_state(request: DeploymentRequest) -> WizardState:
    """Pure transition: the next question, or DEPLOYING once every applicable field is present."""
    step = next_step(request)
    return step.state if step is not None else WizardState.DEPLOYING


class LaunchWizard:
    """
    Stateless multi-turn launch wizard.

    Every call receives the whole accumulated request. Missing fields yield the
    next prompt; a complete request is validated in full, deployed, and then
    optionally paired with a pool.
    """

    def __init__(self, service: LaunchpadService) -> None:
        self.service = service

    def run(self, request: DeploymentRequest) -> WizardOutcome:
        step = next_step(request)
        if step is not None:
            log.debug("[WIZARD] Prompting for %s", step.state.value)
            return WizardOutcome(state=step.state, message=render_prompt(step, request))
        return self._deploy(request)

    def handle(self, request: DeploymentRequest) -> str:
        return self.run(request).message

    def _deploy(self, request: DeploymentRequest) -> WizardOutcome:
        try:
            prepared = self.service.prepare(request)
            log.info("[WIZARD] Deploying %s on %s", prepared.spec.symbol, prepared.network.display_name)
            deployment = self.service.deploy(prepared)
        except Exception as exc:
            error = _classify(exc)
            log.warning("[WIZARD] Deployment failed (%s): %s", error.kind, error.message)
            return WizardOutcome(state=WizardState.FAILED, message=render_deployment_failure(error))

        pool: Optional[PoolResult] = None
        pool_error: Optional[LaunchpadError] = None
        try:
            pool = self.service.create_pool(prepared, deployment)
        except Exception as exc:
            pool_error = _classify(exc)
            log.warning("[WIZARD] Pool step failed (%s): %s", pool_error.kind, pool_error.message)

        message = render_launch_report(
            deployment,
            prepared.spec,
            self.service.fee_config,
            pool=pool,
            pool_error=pool_error,
            pool_requested=prepared.pool_amounts is not None,
        )
        return WizardOutcome(state=WizardState.COMPLETE, message=message, deployment=deployment, pool=pool)
