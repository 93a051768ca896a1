"""Mock design data fixtures for testing.

Payloads use the design service's wire field names, as returned by the LLM.
Provides a hot-arid site (Phoenix) with a two-bedroom plan, a refinement,
a verdict and a diagnostics bundle.
"""

from typing import Dict, Any


# =============================================================================
# PHOENIX, AZ - Hot desert climate
# =============================================================================

PHOENIX_CLIMATE: Dict[str, Any] = {
    "location": "Phoenix, AZ",
    "climateZone": "Hot Desert (BWh)",
    "averageTemp": {"min": 12.5, "max": 41},
    "solarPotential": "Very High",
    "prevailingWinds": "West-Southwest",
    "climate_challenges": ["Extreme summer heat", "High solar gain on west facades"],
    "design_strategies": ["Thermal mass", "Deep overhangs", "Night purge ventilation"],
    "orientation_guidance": "Elongate the plan east-west and minimize west glazing.",
    "window_guidance": "Small, shaded openings on the south; avoid west windows.",
    "zoning_guidance": "Place garages and storage on the west as thermal buffers.",
}


PHOENIX_FLOOR_PLAN: Dict[str, Any] = {
    "designTitle": "Desert Courtyard House",
    "orientation": 15,
    "totalArea": 118,
    "performanceMetrics": {
        "naturalLightScore": 0.72,
        "ventilationEfficiency": 0.65,
        "thermalMassUtilization": 0.81,
        "solarControlRating": 0.78,
    },
    "architectReasoning": "West buffers absorb afternoon heat while a central court drives stack ventilation.",
    "rejected_alternatives": [
        {"option": "Fully glazed south facade", "reason_for_rejection": "Overheating in shoulder seasons."},
    ],
    "rooms": [
        {
            "id": "r1",
            "name": "Living Room",
            "type": "living",
            "x": 0, "y": 0, "width": 8, "height": 6,
            "windows": [{"side": "south", "position": 0.5, "width": 2, "shading": True}],
            "reasoning": "South-facing with deep overhang.",
        },
        {
            "id": "r2",
            "name": "Kitchen",
            "type": "kitchen",
            "x": 8, "y": 0, "width": 4, "height": 6,
            "windows": [{"side": "north", "position": 0.5, "width": 1}],
            "reasoning": "North light, away from afternoon sun.",
        },
        {
            "id": "r3",
            "name": "Master Bedroom",
            "type": "bedroom",
            "x": 0, "y": 6, "width": 5, "height": 4,
            "windows": [{"side": "east", "position": 0.4, "width": 1.2}],
            "reasoning": "",
        },
        {
            "id": "r4",
            "name": "Bedroom 2",
            "type": "bedroom",
            "x": 5, "y": 6, "width": 4, "height": 4,
            "windows": [],
            "reasoning": "Morning light only.",
        },
        {
            "id": "r5",
            "name": "West Garage",
            "type": "buffer",
            "x": -3, "y": 0, "width": 3, "height": 10,
            "windows": [],
            "reasoning": "Thermal buffer against west sun.",
        },
    ],
}


PHOENIX_REVISED_FLOOR_PLAN: Dict[str, Any] = {
    **PHOENIX_FLOOR_PLAN,
    "designTitle": "Desert Courtyard House (Optimized)",
    "performanceMetrics": {
        "naturalLightScore": 0.75,
        "ventilationEfficiency": 0.82,
        "thermalMassUtilization": 0.85,
        "solarControlRating": 0.9,
    },
}


PHOENIX_REFINEMENT: Dict[str, Any] = {
    "revised_floor_plan": PHOENIX_REVISED_FLOOR_PLAN,
    "changes_made": [
        "Added clerestory vents above the living room",
        "Extended the west garage along the full facade",
    ],
    "expected_improvements": {
        "heat": "Reduced afternoon gain through the west wall",
        "airflow": "Stack effect through clerestories",
        "heat_improvement_pct": 18,
        "airflow_improvement_pct": 25.5,
    },
}


PHOENIX_VERDICT: Dict[str, Any] = {
    "iterate": True,
    "recommended_adjustments": ["Add a shaded courtyard pool for evaporative cooling"],
    "expected_benefit": "Further 5-8% cooling load reduction.",
}


PHOENIX_VERDICT_OPTIMIZED: Dict[str, Any] = {
    "iterate": False,
    "recommended_adjustments": ["Minor shading tweaks"],
    "expected_benefit": "Marginal gains only.",
}


PHOENIX_DIAGNOSTICS: Dict[str, Any] = {
    "heat_risk": [
        {"room": "Living Room", "level": "high"},
        {"room": "bedroom", "level": "Medium"},
    ],
    "airflow": [
        {"from": "Living", "to": "Kitchen", "strength": "strong"},
        {"from": "Garage", "to": "Sunroom"},
    ],
    "daylight": [
        {"room": "Kitchen", "quality": "high"},
        {"room": "Master Bedroom", "quality": "low"},
    ],
}
