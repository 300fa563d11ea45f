"""Infrastructure layer for the parimutuel settlement engine.

Re-exports the public API surface for convenience::

    from parimutuel.infrastructure import (
        EventBus, EventStore,
        AssetLedger, InMemoryAssetLedger,
        MarketConfig, load_config_from_json,
    )
"""

from parimutuel.infrastructure.assets import (
    AssetLedger,
    InMemoryAssetLedger,
    transfer,
)
from parimutuel.infrastructure.config import (
    MarketConfig,
    load_config_file,
    load_config_from_json,
    load_config_from_yaml,
)
from parimutuel.infrastructure.event_bus import EventBus, EventStore
from parimutuel.infrastructure.serialization import (
    deserialize,
    from_json,
    from_yaml,
    market_snapshot,
    serialize,
    to_json,
    to_yaml,
)

__all__ = [
    # Assets
    "AssetLedger",
    "InMemoryAssetLedger",
    "transfer",
    # Event bus
    "EventBus",
    "EventStore",
    # Configuration
    "MarketConfig",
    "load_config_file",
    "load_config_from_json",
    "load_config_from_yaml",
    # Serialization
    "serialize",
    "deserialize",
    "market_snapshot",
    "to_json",
    "from_json",
    "to_yaml",
    "from_yaml",
]
