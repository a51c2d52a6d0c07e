"""The fixed set of component types a backup can cover."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Tuple
from config.settings import COMPONENT_TYPES

@dataclass(frozen=True)
class BackupTarget:
	name: str       # CLI name and backup subdirectory, e.g. "data_bags"
	singular: str   # used in progress messages, e.g. "data_bag"
	endpoint: str   # REST collection, e.g. "data"

	@property
	def is_data_bags(self) -> bool:
		return self.name == 'data_bags'

TARGETS: Tuple[BackupTarget, ...] = tuple(
	BackupTarget(name, singular, endpoint) for name, (singular, endpoint) in COMPONENT_TYPES.items()
)
_BY_NAME: Dict[str, BackupTarget] = {t.name: t for t in TARGETS}

NODES = _BY_NAME['nodes']
ROLES = _BY_NAME['roles']
ENVIRONMENTS = _BY_NAME['environments']
DATA_BAGS = _BY_NAME['data_bags']

def target_names() -> List[str]:
	return [t.name for t in TARGETS]

def get_target(name: str) -> BackupTarget:
	"""Look up a target by CLI name; raises KeyError for unknown names."""
	return _BY_NAME[name]
