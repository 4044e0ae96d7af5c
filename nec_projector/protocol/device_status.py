# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Last-known projector status and identity.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import IntEnum

from ..internal_types import *

class OperationStatus(IntEnum):
    """Coarse power state reported in running status replies"""
    STANDBY = 0x00
    POWER_ON = 0x04
    COOLING = 0x05
    STANDBY_ERROR = 0x06
    STANDBY_POWER_SAVING = 0x0F
    NETWORK_STANDBY = 0x10
    NOT_SUPPORTED = 0xFF

    @classmethod
    def from_code(cls, code: int) -> OperationStatus:
        """Returns the status for a raw code; unknown codes map to NOT_SUPPORTED"""
        try:
            return cls(code)
        except ValueError:
            return cls.NOT_SUPPORTED

    def __str__(self) -> str:
        return operation_status_map[self]

operation_status_map: Dict[OperationStatus, str] = {
    OperationStatus.STANDBY: "Standby (Sleep)",
    OperationStatus.POWER_ON: "Power on",
    OperationStatus.COOLING: "Cooling",
    OperationStatus.STANDBY_ERROR: "Standby (error)",
    OperationStatus.STANDBY_POWER_SAVING: "Standby (Power saving)",
    OperationStatus.NETWORK_STANDBY: "Network standby",
    OperationStatus.NOT_SUPPORTED: "Not supported",
  }
"""Friendly names of the operation status values, as documented by the vendor."""

@dataclass(frozen=True)
class DeviceStatus:
    """A snapshot of the projector's status. Defaults are the conservative
    "standby, nothing muted" state assumed before the first status reply."""
    power_on: bool = False
    cooling: bool = False
    power_transition: bool = False
    operation_status: OperationStatus = OperationStatus.STANDBY
    picture_mute: bool = False
    picture_freeze: bool = False
    sound_mute: bool = False
    onscreen_mute: bool = False

    @property
    def operation_status_str(self) -> str:
        return str(self.operation_status)

    @property
    def is_stable(self) -> bool:
        """True iff the projector is neither cooling nor in a power on/off transition"""
        return not (self.cooling or self.power_transition)

    def as_jsonable(self) -> JsonableDict:
        return {
            "power_on": self.power_on,
            "cooling": self.cooling,
            "power_transition": self.power_transition,
            "operation_status": self.operation_status_str,
            "picture_mute": self.picture_mute,
            "picture_freeze": self.picture_freeze,
            "sound_mute": self.sound_mute,
            "onscreen_mute": self.onscreen_mute,
          }

STATUS_FIELDS = frozenset(f.name for f in dataclasses.fields(DeviceStatus))

BOOLEAN_STATUS_FIELDS = frozenset(name for name in STATUS_FIELDS if name != "operation_status")

@dataclass(frozen=True)
class StatusDelta:
    """The change to DeviceStatus carried by one successful reply.

    changes are applied first, then each field in toggles is inverted.
    """
    changes: Mapping[str, Any] = field(default_factory=dict)
    toggles: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in self.changes:
            if not name in STATUS_FIELDS:
                raise ValueError(f"Unknown DeviceStatus field: {name}")
        for name in self.toggles:
            if not name in BOOLEAN_STATUS_FIELDS:
                raise ValueError(f"Cannot toggle DeviceStatus field: {name}")

    @property
    def is_empty(self) -> bool:
        return len(self.changes) == 0 and len(self.toggles) == 0

    def apply_to(self, status: DeviceStatus) -> DeviceStatus:
        """Returns a new DeviceStatus with this delta applied"""
        result = dataclasses.replace(status, **self.changes)
        if len(self.toggles) > 0:
            result = dataclasses.replace(
                result, **{name: not getattr(result, name) for name in self.toggles})
        return result

class DeviceState:
    """Latest known status and identity of one connected projector.

    The status only changes through merge(), which the controller calls with the
    delta of a successfully decoded reply.
    """
    _status: DeviceStatus
    _control_id: Optional[int] = None
    _model_code: Optional[int] = None

    def __init__(self) -> None:
        self._status = DeviceStatus()

    @property
    def status(self) -> DeviceStatus:
        return self._status

    @property
    def control_id(self) -> Optional[int]:
        """The control ID echoed in the most recent reply, or None before the first reply"""
        return self._control_id

    @property
    def model_code(self) -> Optional[int]:
        """The model code echoed in the most recent reply, or None before the first reply"""
        return self._model_code

    @property
    def identity(self) -> Optional[Tuple[int, int]]:
        if self._control_id is None or self._model_code is None:
            return None
        return (self._control_id, self._model_code)

    def set_identity(self, control_id: int, model_code: int) -> None:
        self._control_id = control_id
        self._model_code = model_code

    def merge(self, delta: StatusDelta) -> DeviceStatus:
        """Applies a delta and returns the new status"""
        self._status = delta.apply_to(self._status)
        return self._status

    def as_jsonable(self) -> JsonableDict:
        return {
            "control_id": self._control_id,
            "model_code": self._model_code,
            "status": self._status.as_jsonable(),
          }

    def __str__(self) -> str:
        return f"DeviceState(identity={self.identity}, status={self._status})"

    def __repr__(self) -> str:
        return str(self)
