import os
from typing import Dict, Any

class Config:
	"""Configuration for the commit view."""
	
	# Projection
	ABBREV_LENGTH = int(os.getenv("COMMIT_VIEW_ABBREV_LENGTH", "7"))
	REMOTE_PLACEHOLDER = os.getenv("COMMIT_VIEW_REMOTE_PLACEHOLDER", "<remote>/<branch>")
	# Refuse to render records that carry parse diagnostics
	FAIL_ON_MALFORMED = bool(int(os.getenv("COMMIT_VIEW_FAIL_ON_MALFORMED", "0")))
	
	# Console host
	GUTTER_ENABLED = bool(int(os.getenv("COMMIT_VIEW_GUTTER", "1")))
	
	# Observability
	METRICS_ROOT = os.getenv("METRICS_ROOT", ".cache/commit_view/metrics")
	METRICS_ENABLED = bool(int(os.getenv("METRICS_ENABLED", "0")))

	@classmethod
	def get_render_config(cls) -> Dict[str, Any]:
		"""Get projection configuration.
		
		Returns:
			Mapping with abbreviation length, remote placeholder and strict flag.
		"""
		return {
			"abbrev_length": cls.ABBREV_LENGTH,
			"remote_placeholder": cls.REMOTE_PLACEHOLDER,
			"fail_on_malformed": cls.FAIL_ON_MALFORMED,
		}

	@classmethod
	def observability(cls) -> Dict[str, Any]:
		return {
			"metrics_root": cls.METRICS_ROOT,
			"metrics_enabled": cls.METRICS_ENABLED,
		}
