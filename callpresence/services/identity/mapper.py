"""OpenPhone user to Teams user mapping."""
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import yaml

logger = logging.getLogger(__name__)


class IdentityMapper:
    """Resolves OpenPhone user ids to Teams user identities (UPN/email)."""

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping: Dict[str, str] = dict(mapping)

    def resolve(self, provider_user_id: Optional[str]) -> Optional[str]:
        """Return the Teams user for ``provider_user_id``, or None if unmapped."""
        if not provider_user_id:
            return None
        return self._mapping.get(provider_user_id)

    def __len__(self) -> int:
        return len(self._mapping)


def load_identity_mapping(mapping_file: Union[str, Path]) -> Dict[str, str]:
    """Load the user mapping from a YAML file with a top-level ``users`` table."""
    path = Path(mapping_file)
    if not path.exists():
        logger.warning(f"[IDENTITY] Mapping file not found: {path} - no users will be synced")
        return {}

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    users = data.get("users") or {}
    if not isinstance(users, dict):
        raise ValueError(f"'users' in {path} must be a mapping of user id to Teams user")

    mapping = {str(user_id): str(upn) for user_id, upn in users.items() if upn}
    logger.info(f"[IDENTITY] Loaded {len(mapping)} user mapping(s) from {path}")
    return mapping
