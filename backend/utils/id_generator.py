"""
Short prefixed ID generator for HLM pass artefacts.

Format: {prefix}_{base36_random}
- clst_xxxxxxxxxx  - cluster
- gap_xxxxxxxxxx   - gap
- rdnd_xxxxxxxxxx  - redundancy
- orph_xxxxxxxxxx  - orphan
- brdg_xxxxxxxxxx  - bridge
- hub_xxxxxxxxxx   - hub
- rec_xxxxxxxxxx   - recommendation
- topo_xxxxxxxxxx  - topology snapshot
- hlm_xxxxxxxxxx   - pass record

10 chars base36 = 36^10 ≈ 3.6e15 unique IDs per type.
Artefact IDs are fresh per pass; composition (members, tag pairs,
unit pairs) is what stays stable between identical passes.
"""
import secrets
import re
from typing import Optional

# Base36 alphabet (lowercase letters + digits)
ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
BASE = len(ALPHABET)  # 36
RANDOM_LENGTH = 10

# Valid prefixes
PREFIXES = {
    'cluster': 'clst',
    'gap': 'gap',
    'redundancy': 'rdnd',
    'orphan': 'orph',
    'bridge': 'brdg',
    'hub': 'hub',
    'recommendation': 'rec',
    'topology': 'topo',
    'pass': 'hlm',
}

# Reverse mapping for validation
PREFIX_TO_TYPE = {v: k for k, v in PREFIXES.items()}

# Regex for validation
ID_PATTERN = re.compile(
    r'^(' + '|'.join(sorted(PREFIX_TO_TYPE)) + r')_[0-9a-z]{' + str(RANDOM_LENGTH) + r'}$'
)


def _random_base36(length: int = RANDOM_LENGTH) -> str:
    """Generate random base36 string"""
    result = []
    for _ in range(length):
        result.append(ALPHABET[secrets.randbelow(BASE)])
    return ''.join(result)


def generate_id(artefact_type: str) -> str:
    """
    Generate a new short ID for the given artefact type.

    Args:
        artefact_type: One of the keys of PREFIXES ('cluster', 'gap', ...)

    Returns:
        Short ID like 'clst_x5b8r2yj0q'

    Raises:
        ValueError: If artefact_type is invalid
    """
    if artefact_type not in PREFIXES:
        raise ValueError(f"Invalid artefact type: {artefact_type}. "
                         f"Must be one of: {list(PREFIXES.keys())}")

    prefix = PREFIXES[artefact_type]
    return f"{prefix}_{_random_base36()}"


def validate_id(id_str: str) -> bool:
    """Check if a string is a valid HLM artefact ID."""
    if not id_str or not isinstance(id_str, str):
        return False
    return bool(ID_PATTERN.match(id_str))


def get_id_type(id_str: str) -> Optional[str]:
    """
    Extract the artefact type from an ID.

    Returns:
        Artefact type ('cluster', 'gap', etc.) or None if invalid
    """
    if not validate_id(id_str):
        return None
    prefix = id_str.split('_', 1)[0]
    return PREFIX_TO_TYPE.get(prefix)


# Convenience functions for each type
def generate_cluster_id() -> str:
    return generate_id('cluster')


def generate_gap_id() -> str:
    return generate_id('gap')


def generate_redundancy_id() -> str:
    return generate_id('redundancy')


def generate_orphan_id() -> str:
    return generate_id('orphan')


def generate_bridge_id() -> str:
    return generate_id('bridge')


def generate_hub_id() -> str:
    return generate_id('hub')


def generate_recommendation_id() -> str:
    return generate_id('recommendation')


def generate_topology_id() -> str:
    return generate_id('topology')


def generate_pass_id() -> str:
    return generate_id('pass')
