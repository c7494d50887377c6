import json
from pathlib import Path

_DEFAULT_CONFIG = Path(__file__).parent / "config.json"

RANDOM_SOURCES = ("system", "secure")


class EncoderConfig:
    __slots__ = ("time_length", "random_length", "random_source", "strict_overflow")
    
    def __init__(self, time_length=10, random_length=16, random_source="system", strict_overflow=False):
        if random_source not in RANDOM_SOURCES:
            raise ValueError(f"random_source must be one of {RANDOM_SOURCES}, got {random_source!r}")
        self.time_length = time_length
        self.random_length = random_length
        self.random_source = random_source
        self.strict_overflow = strict_overflow


class ServerConfig:
    __slots__ = ("host", "port")
    
    def __init__(self, host="127.0.0.1", port=8080):
        self.host = host
        self.port = port


class LoggingConfig:
    __slots__ = ("level", "file", "crash_file")
    
    def __init__(self, level="INFO", file="logs/issued.jsonl", crash_file="logs/crash.log"):
        self.level = level
        self.file = file
        self.crash_file = crash_file


class Config:
    __slots__ = ("encoder", "server", "logging")
    
    def __init__(self, encoder=None, server=None, logging=None):
        self.encoder = encoder or EncoderConfig()
        self.server = server or ServerConfig()
        self.logging = logging or LoggingConfig()

    @classmethod
    def from_dict(cls, d):
        return cls(
            EncoderConfig(**d.get("encoder", {})),
            ServerConfig(**d.get("server", {})),
            LoggingConfig(**d.get("logging", {})),
        )


def load_config(path=None):
    config_path = Path(path) if path else _DEFAULT_CONFIG
    
    if not config_path.exists():
        return Config()
    
    with open(config_path) as file:
        return Config.from_dict(json.load(file))
