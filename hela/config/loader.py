"""
HELA CLI TOML Configuration Loader

Loads cli.toml (networks, their runtimes, and the wallet) into dataclasses
and writes it back after a mutating command. Follows the dataclass +
from_dict + from_file pattern used by every config section.

Resolution order for the file location:
    1. Explicit path (--config)
    2. HELA_CONFIG env var
    3. $HELA_CONFIG_DIR/cli.toml (default ~/.config/hela/cli.toml)

A missing file is created with defaults on first load.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import tomli_w

from ..constants import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG_DIR,
    DEFAULT_DENOMINATION_DECIMALS,
    DEFAULT_DENOMINATION_SYMBOL,
    NATIVE_DENOMINATION_KEY,
    WALLET_DIRNAME,
)
from ..exceptions import (
    AccountNotFound,
    ConfigurationError,
    NetworkNotFound,
    RuntimeNotFound,
)

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9_\-]+$")
_HEX32_RE = re.compile(r"^[0-9a-fA-F]{64}$")


def validate_identifier(name: str) -> None:
    """Names of networks, runtimes and accounts."""
    if not name or not _IDENTIFIER_RE.match(name):
        raise ConfigurationError(
            f"malformed identifier '{name}': only letters, digits, '_' and '-' are allowed"
        )


def config_directory() -> Path:
    """Directory holding cli.toml and the wallet keystores."""
    if v := os.environ.get("HELA_CONFIG_DIR"):
        return Path(v)
    return DEFAULT_CONFIG_DIR


# ---------------------------------------------------------------------------
# Networks and runtimes
# ---------------------------------------------------------------------------


@dataclass
class Denomination:
    """Token symbol and number of decimal places."""
    symbol: str = DEFAULT_DENOMINATION_SYMBOL
    decimals: int = DEFAULT_DENOMINATION_DECIMALS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Denomination":
        return cls(
            symbol=data.get("symbol", DEFAULT_DENOMINATION_SYMBOL),
            decimals=int(data.get("decimals", DEFAULT_DENOMINATION_DECIMALS)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"symbol": self.symbol, "decimals": self.decimals}

    def validate(self) -> None:
        if not 0 <= self.decimals <= 255:
            raise ConfigurationError(f"invalid denomination decimals: {self.decimals}")


@dataclass
class ParaTime:
    """A runtime attached to a network."""
    id: str
    description: str = ""
    denominations: Dict[str, Denomination] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParaTime":
        return cls(
            id=data.get("id", ""),
            description=data.get("description", ""),
            denominations={
                key: Denomination.from_dict(value)
                for key, value in data.get("denominations", {}).items()
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "denominations": {k: d.to_dict() for k, d in self.denominations.items()},
        }

    def validate(self) -> None:
        if not _HEX32_RE.match(self.id or ""):
            raise ConfigurationError(f"malformed runtime ID '{self.id}': expected 32 hex-encoded bytes")
        for denomination in self.denominations.values():
            denomination.validate()

    def namespace(self) -> bytes:
        """Raw runtime identifier."""
        return bytes.fromhex(self.id)

    def get_denomination(self, denom: str = NATIVE_DENOMINATION_KEY) -> Denomination:
        """Denomination info, falling back to the defaults when not configured."""
        return self.denominations.get(denom or NATIVE_DENOMINATION_KEY, Denomination())


@dataclass
class ParaTimes:
    """[networks.<name>.paratimes] section."""
    default: str = ""
    all: Dict[str, ParaTime] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParaTimes":
        return cls(
            default=data.get("default", ""),
            all={k: ParaTime.from_dict(v) for k, v in data.get("all", {}).items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"default": self.default, "all": {k: p.to_dict() for k, p in self.all.items()}}

    def add(self, name: str, paratime: ParaTime) -> None:
        validate_identifier(name)
        paratime.validate()
        if name in self.all:
            raise ConfigurationError(f"runtime '{name}' already exists")
        self.all[name] = paratime
        if not self.default:
            self.default = name

    def remove(self, name: str) -> None:
        if name not in self.all:
            raise RuntimeNotFound(name)
        del self.all[name]
        if self.default == name:
            self.default = ""

    def set_default(self, name: str) -> None:
        if name not in self.all:
            raise RuntimeNotFound(name)
        self.default = name

    def validate(self) -> None:
        for name, paratime in self.all.items():
            validate_identifier(name)
            paratime.validate()
        if self.default and self.default not in self.all:
            raise ConfigurationError(f"default runtime '{self.default}' does not exist")


@dataclass
class Network:
    """A consensus network and its runtimes."""
    chain_context: str
    rpc: str
    description: str = ""
    denomination: Denomination = field(default_factory=Denomination)
    paratimes: ParaTimes = field(default_factory=ParaTimes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Network":
        return cls(
            chain_context=data.get("chain_context", ""),
            rpc=data.get("rpc", ""),
            description=data.get("description", ""),
            denomination=Denomination.from_dict(data.get("denomination", {})),
            paratimes=ParaTimes.from_dict(data.get("paratimes", {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chain_context": self.chain_context,
            "rpc": self.rpc,
            "description": self.description,
            "denomination": self.denomination.to_dict(),
            "paratimes": self.paratimes.to_dict(),
        }

    def validate(self) -> None:
        if not _HEX32_RE.match(self.chain_context or ""):
            raise ConfigurationError(f"malformed chain context '{self.chain_context}'")
        if not self.rpc.startswith(("http://", "https://")):
            raise ConfigurationError(f"malformed RPC endpoint '{self.rpc}'")
        self.denomination.validate()
        self.paratimes.validate()


@dataclass
class Networks:
    """[networks] section."""
    default: str = ""
    all: Dict[str, Network] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Networks":
        return cls(
            default=data.get("default", ""),
            all={k: Network.from_dict(v) for k, v in data.get("all", {}).items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"default": self.default, "all": {k: n.to_dict() for k, n in self.all.items()}}

    def add(self, name: str, network: Network) -> None:
        validate_identifier(name)
        network.validate()
        if name in self.all:
            raise ConfigurationError(f"network '{name}' already exists")
        self.all[name] = network
        if not self.default:
            self.default = name

    def remove(self, name: str) -> None:
        if name not in self.all:
            raise NetworkNotFound(name)
        del self.all[name]
        if self.default == name:
            self.default = ""

    def set_default(self, name: str) -> None:
        if name not in self.all:
            raise NetworkNotFound(name)
        self.default = name

    def validate(self) -> None:
        for name, network in self.all.items():
            validate_identifier(name)
            network.validate()
        if self.default and self.default not in self.all:
            raise ConfigurationError(f"default network '{self.default}' does not exist")


# ---------------------------------------------------------------------------
# Wallet
# ---------------------------------------------------------------------------


@dataclass
class AccountConfig:
    """[wallet.all.<name>] entry. Key material lives in the keystore file."""
    address: str
    kind: str = "file"
    algorithm: str = "ed25519-raw"
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccountConfig":
        return cls(
            address=data.get("address", ""),
            kind=data.get("kind", "file"),
            algorithm=data.get("algorithm", "ed25519-raw"),
            description=data.get("description", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "kind": self.kind,
            "algorithm": self.algorithm,
            "description": self.description,
        }


@dataclass
class Wallet:
    """[wallet] section."""
    default: str = ""
    all: Dict[str, AccountConfig] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Wallet":
        return cls(
            default=data.get("default", ""),
            all={k: AccountConfig.from_dict(v) for k, v in data.get("all", {}).items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"default": self.default, "all": {k: a.to_dict() for k, a in self.all.items()}}

    def add(self, name: str, account: AccountConfig) -> None:
        validate_identifier(name)
        if name in self.all:
            raise ConfigurationError(f"account '{name}' already exists")
        self.all[name] = account
        if not self.default:
            self.default = name

    def remove(self, name: str) -> None:
        if name not in self.all:
            raise AccountNotFound(name)
        del self.all[name]
        if self.default == name:
            self.default = ""

    def set_default(self, name: str) -> None:
        if name not in self.all:
            raise AccountNotFound(name)
        self.default = name

    def validate(self) -> None:
        for name in self.all:
            validate_identifier(name)
        if self.default and self.default not in self.all:
            raise ConfigurationError(f"default account '{self.default}' does not exist")


# -----------------------------------------------------------------------
# Top-level config
# -----------------------------------------------------------------------

@dataclass
class CliConfig:
    """
    Unified client configuration.

    Read once at startup; commands that add, remove or change defaults
    mutate it in memory and call save() once at the end.
    """
    networks: Networks = field(default_factory=Networks)
    wallet: Wallet = field(default_factory=Wallet)
    path: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: Optional[Path] = None) -> "CliConfig":
        return cls(
            networks=Networks.from_dict(data.get("networks", {})),
            wallet=Wallet.from_dict(data.get("wallet", {})),
            path=path,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"networks": self.networks.to_dict(), "wallet": self.wallet.to_dict()}

    @classmethod
    def from_file(cls, config_path: Path) -> "CliConfig":
        """
        Load configuration from a TOML file, creating it with defaults if absent.

        Args:
            config_path: Path to cli.toml

        Returns:
            CliConfig instance
        """
        path = Path(config_path)
        if not path.exists():
            logger.info("Config file not found: %s, creating it with defaults", path)
            cfg = cls(path=path)
            cfg.save()
            return cfg

        with open(path, "rb") as f:
            try:
                raw = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigurationError(f"failed to parse {path}: {e}")

        return cls.from_dict(raw, path=path)

    @property
    def wallet_dir(self) -> Path:
        """Directory holding the encrypted account keystores."""
        base = self.path.parent if self.path else config_directory()
        return base / WALLET_DIRNAME

    def validate(self) -> bool:
        """
        Validate all configuration sections.

        Raises:
            ConfigurationError: on invalid config
        """
        self.networks.validate()
        self.wallet.validate()
        return True

    def save(self) -> None:
        """Atomically write the configuration back to its file."""
        if self.path is None:
            raise ConfigurationError("configuration has no file to save to")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".cli-", suffix=".toml")
        try:
            with os.fdopen(fd, "wb") as f:
                tomli_w.dump(self.to_dict(), f)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Saved configuration to %s", self.path)


# -----------------------------------------------------------------------
# Convenience function
# -----------------------------------------------------------------------

def load_config(path: Optional[str] = None) -> CliConfig:
    """
    Load and validate the client configuration.

    Resolution order:
        1. Explicit *path* argument
        2. HELA_CONFIG env var
        3. cli.toml inside config_directory()
    """
    if path is None:
        path = os.environ.get("HELA_CONFIG") or str(config_directory() / CONFIG_FILENAME)

    cfg = CliConfig.from_file(Path(path))
    cfg.validate()
    return cfg
