"""Data preparation for export."""

import datetime
import json
from typing import Any, Dict

from ..core.models import AnalysisParameters, AnalysisResult


def prepare_export(result: AnalysisResult, params: AnalysisParameters) -> Dict[str, Any]:
    """Prepare an analysis result for JSON export."""
    return {
        "target_game_id": params.target_game_id,
        "subject": params.subject_identity,
        "parameters": {
            "min_overlap": params.min_overlap,
            "min_similarity_pct": params.min_similarity_pct,
            "max_profiles": params.max_profiles,
        },
        "result": result.to_dict(),
        "metadata": {
            "export_timestamp": None,  # Will be set on export
            "version": "1.0.0"
        }
    }


def export_to_json(data: Dict[str, Any], filename: str) -> None:
    """Export data to JSON file."""
    data.setdefault("metadata", {})["export_timestamp"] = datetime.datetime.now().isoformat()
    
    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
