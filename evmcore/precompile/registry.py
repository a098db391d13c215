"""Sets of precompiled contracts by protocol upgrade."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from evmcore.bits import B160
from evmcore.precompile import blake2, bn128, hashes, secp256k1
from evmcore.precompile.error import PrecompileResult
from evmcore.result import Log
from evmcore.specification import SpecId

PrecompileFn = Callable[[bytes, int], PrecompileResult]


class PrecompileKind(enum.Enum):
    """Whether a precompile is built in or supplied by the user."""

    STANDARD = "Standard"
    CUSTOM = "Custom"


@dataclass(frozen=True)
class Precompile:
    """A precompiled contract: a function of input bytes and a gas limit."""

    function: PrecompileFn
    kind: PrecompileKind = PrecompileKind.STANDARD

    def __call__(self, data: bytes, gas_limit: int) -> PrecompileResult:
        """Run the contract; returns gas used and output, or raises PrecompileError."""
        return self.function(data, gas_limit)

    def __repr__(self) -> str:
        return self.kind.value


@dataclass
class PrecompileOutput:
    """Cost, output and logs of a precompile run."""

    cost: int
    output: bytes
    logs: List[Log] = field(default_factory=list)

    @classmethod
    def without_logs(cls, cost: int, output: bytes) -> "PrecompileOutput":
        return cls(cost=cost, output=bytes(output))


class PrecompileSpecId(enum.IntEnum):
    """Upgrades that changed the set of precompiles."""

    HOMESTEAD = 0
    BYZANTIUM = 1
    ISTANBUL = 2
    BERLIN = 3
    LATEST = 4

    @classmethod
    def from_spec_id(cls, spec_id: SpecId) -> "PrecompileSpecId":
        """The precompile set that applies under a protocol spec."""
        spec_id = SpecId(spec_id)
        if spec_id == SpecId.LATEST:
            return cls.LATEST
        if spec_id >= SpecId.BERLIN:
            return cls.BERLIN
        if spec_id >= SpecId.ISTANBUL:
            return cls.ISTANBUL
        if spec_id >= SpecId.BYZANTIUM:
            return cls.BYZANTIUM
        return cls.HOMESTEAD

    def enabled(self, spec_id: int) -> bool:
        """True if ``spec_id`` is at or after this spec."""
        return spec_id >= self


def _standard(number: int, function: PrecompileFn) -> Tuple[B160, Precompile]:
    return B160.from_u64(number), Precompile(function)


_CACHE: Dict[str, "Precompiles"] = {}


@dataclass(frozen=True)
class Precompiles:
    """A read-only map from address to precompiled contract."""

    fun: Mapping[B160, Precompile]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fun", MappingProxyType(dict(self.fun)))

    def _extended(self, *entries: Tuple[B160, Precompile]) -> "Precompiles":
        merged = dict(self.fun)
        merged.update(entries)
        return Precompiles(merged)

    @classmethod
    def homestead(cls) -> "Precompiles":
        if "homestead" not in _CACHE:
            _CACHE["homestead"] = cls(
                dict(
                    [
                        _standard(1, secp256k1.ec_recover_run),
                        _standard(2, hashes.sha256_run),
                        _standard(3, hashes.ripemd160_run),
                        _standard(4, hashes.identity_run),
                    ]
                )
            )
        return _CACHE["homestead"]

    @classmethod
    def byzantium(cls) -> "Precompiles":
        if "byzantium" not in _CACHE:
            # EIP-196 and EIP-197: alt_bn128 addition, multiplication and pairing.
            _CACHE["byzantium"] = cls.homestead()._extended(
                _standard(6, bn128.add_byzantium),
                _standard(7, bn128.mul_byzantium),
                _standard(8, bn128.pair_byzantium),
            )
        return _CACHE["byzantium"]

    @classmethod
    def istanbul(cls) -> "Precompiles":
        if "istanbul" not in _CACHE:
            # EIP-152 BLAKE2 F, EIP-1108 cheaper alt_bn128.
            _CACHE["istanbul"] = cls.byzantium()._extended(
                _standard(9, blake2.run),
                _standard(6, bn128.add_istanbul),
                _standard(7, bn128.mul_istanbul),
                _standard(8, bn128.pair_istanbul),
            )
        return _CACHE["istanbul"]

    @classmethod
    def berlin(cls) -> "Precompiles":
        if "berlin" not in _CACHE:
            _CACHE["berlin"] = cls.istanbul()._extended()
        return _CACHE["berlin"]

    @classmethod
    def latest(cls) -> "Precompiles":
        return cls.berlin()

    @classmethod
    def new(cls, spec: PrecompileSpecId) -> "Precompiles":
        """The precompile set for ``spec``."""
        builders = {
            PrecompileSpecId.HOMESTEAD: cls.homestead,
            PrecompileSpecId.BYZANTIUM: cls.byzantium,
            PrecompileSpecId.ISTANBUL: cls.istanbul,
            PrecompileSpecId.BERLIN: cls.berlin,
            PrecompileSpecId.LATEST: cls.latest,
        }
        return builders[PrecompileSpecId(spec)]()

    def addresses(self) -> Iterator[B160]:
        return iter(self.fun)

    def __contains__(self, address: object) -> bool:
        return address in self.fun

    def get(self, address: B160) -> Optional[Precompile]:
        return self.fun.get(address)

    def __len__(self) -> int:
        return len(self.fun)