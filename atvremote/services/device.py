"""Device level helpers: stay-awake settings, power state, reboot."""

from __future__ import annotations

import logging
import re
from typing import Final

import msgspec
import tenacity

from ..const import (
    BOOT_COMPLETED_COMMAND,
    BOOT_POLL_INTERVAL,
    DEFAULT_BOOT_TIMEOUT,
    DUMPSYS_POWER_COMMAND,
    REBOOT_COMMAND,
    STAY_AWAKE_SETTINGS,
)
from ..errors import RemoteError
from ..events import EventBus, LogLevel
from ..protocol.commands import keyevent_command, settings_command
from ..protocol.keycodes import KEYCODES
from .session import SessionManager

logger = logging.getLogger("atvremote.device")

UNKNOWN: Final[str] = "unknown"

_POWER_FIELDS: Final[dict[str, re.Pattern[str]]] = {
    name: re.compile(rf"^\s*{name}=([A-Za-z0-9]+)", re.MULTILINE)
    for name in ("mIsPowered", "mWakefulness", "mDisplayReady")
}


class PowerState(msgspec.Struct, frozen=True):
    """Raw values reported by ``dumpsys power``; ``"unknown"`` when absent."""

    is_powered: str = UNKNOWN
    wakefulness: str = UNKNOWN
    display_ready: str = UNKNOWN

    @property
    def awake(self) -> bool:
        return self.is_powered == "true" and self.wakefulness == "Awake" and self.display_ready == "true"


def parse_power_state(output: str) -> PowerState:
    values = {}
    for name, pattern in _POWER_FIELDS.items():
        match = pattern.search(output)
        values[name] = match.group(1) if match else UNKNOWN
    return PowerState(
        is_powered=values["mIsPowered"],
        wakefulness=values["mWakefulness"],
        display_ready=values["mDisplayReady"],
    )


def _not_booted(result: bool) -> bool:
    return result is False


def _log_boot_poll(retry_state: tenacity.RetryCallState) -> None:
    logger.debug(
        "Boot not complete after attempt %d; polling again in %.2fs",
        retry_state.attempt_number,
        retry_state.next_action.sleep if retry_state.next_action else 0,
    )


class DeviceSettings:
    """Commands that manage the device itself rather than simulate input."""

    source = "handleSettings"

    def __init__(self, session: SessionManager, bus: EventBus) -> None:
        self._session = session
        self._bus = bus

    async def handle_settings(self, mode: str, quiet: bool | None = None) -> dict[str, str]:
        """Read (``"get"``) or apply (``"set"``) the stay-awake settings.

        Returns the trimmed shell output per ``namespace/key``. ``quiet``
        overrides the bus quiet flag for the progress messages of this call.
        """
        if mode not in ("get", "set"):
            raise ValueError(f"Unknown settings mode {mode!r}; expected 'get' or 'set'")
        verbose = quiet is False

        def progress(message: str) -> None:
            if quiet is not True:
                self._bus.log(LogLevel.INFO, message, self.source, force=verbose)

        results: dict[str, str] = {}
        for namespace, key, value in STAY_AWAKE_SETTINGS:
            output = await self._session.run_command(
                settings_command(mode, namespace, key, value),
                source=self.source,
            )
            text = output.decode("utf-8", errors="replace").strip()
            results[f"{namespace}/{key}"] = text
            if mode == "set":
                progress(f"Set {namespace} {key} to {value}")
            else:
                progress(f"{namespace} {key}: {text}")
        return results

    async def get_power_state(self) -> PowerState:
        output = await self._session.run_command(DUMPSYS_POWER_COMMAND, source="getPowerState")
        return parse_power_state(output.decode("utf-8", errors="replace"))

    async def ensure_awake(self) -> PowerState:
        """Wake the device as needed, then return to the home screen."""
        state = await self.get_power_state()
        self._bus.log(
            LogLevel.DEBUG,
            f"Power state: powered={state.is_powered} wakefulness={state.wakefulness} "
            f"display_ready={state.display_ready}",
            "ensureAwake",
            data=msgspec.structs.asdict(state),
        )
        if state.is_powered != "true":
            await self._press(KEYCODES["power"])
        if state.wakefulness != "Awake":
            await self._press(KEYCODES["wakeup"])
        if state.display_ready != "true":
            await self._press(KEYCODES["power"])
        await self._press(KEYCODES["home"])
        return state

    async def _press(self, code: int) -> bytes:
        return await self._session.run_command(keyevent_command(code), source="ensureAwake")

    async def reboot(self) -> bool:
        """Ask the device to reboot; the session is considered lost afterwards."""
        await self._session.run_command(REBOOT_COMMAND, source="reboot")
        self._session.mark_lost()
        self._bus.log(LogLevel.INFO, f"Reboot requested for {self._session.address}", "reboot")
        return True

    async def _boot_completed(self) -> bool:
        output = await self._session.run_command(
            BOOT_COMPLETED_COMMAND,
            source="waitBootComplete",
            report_errors=False,
        )
        return output.decode("utf-8", errors="replace").strip() == "1"

    async def wait_boot_complete(
        self,
        timeout: float = DEFAULT_BOOT_TIMEOUT,
        poll_interval: float = BOOT_POLL_INTERVAL,
    ) -> bool:
        """Poll ``sys.boot_completed`` until it reads ``1`` or *timeout* seconds pass."""
        retryer = tenacity.AsyncRetrying(
            stop=tenacity.stop_after_delay(timeout),
            wait=tenacity.wait_fixed(poll_interval),
            retry=tenacity.retry_if_result(_not_booted) | tenacity.retry_if_exception_type(RemoteError),
            before_sleep=_log_boot_poll,
            reraise=False,
        )
        try:
            booted = await retryer(self._boot_completed)
        except tenacity.RetryError:
            self._bus.log(LogLevel.WARN, f"Boot did not complete within {timeout:g}s", "waitBootComplete")
            return False
        self._bus.log(LogLevel.INFO, "Boot complete", "waitBootComplete")
        return booted


__all__ = ["DeviceSettings", "PowerState", "parse_power_state"]
