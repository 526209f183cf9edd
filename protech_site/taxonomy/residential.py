"""Residential services — heating, cooling and indoor air for homes."""

_COOLING_ITEMS = [
    {"id": "central-ac", "name": "Central AC", "icon": "❄️"},
    {"id": "mini-splits", "name": "Mini Splits", "icon": "🔄"},
    {"id": "heat-pumps", "name": "Heat Pumps", "icon": "♨️"},
    {"id": "thermostat", "name": "Thermostat", "icon": "🌡️"},
]

_HEATING_ITEMS = [
    {"id": "furnaces", "name": "Furnaces", "icon": "🔥"},
    {"id": "boilers", "name": "Boilers", "icon": "🧯"},
    {"id": "heat-pumps", "name": "Heat Pumps", "icon": "♨️"},
    {"id": "thermostat", "name": "Thermostat", "icon": "🌡️"},
    {"id": "mini-splits", "name": "Mini Splits", "icon": "🔄"},
]

CATEGORY = {
    "id": "residential",
    "name": "Residential Services",
    "description": "Complete HVAC solutions for your home",
    "systems": [
        {
            "id": "cooling",
            "name": "Cooling",
            "icon": "❄️",
            "description": "Complete air conditioning and cooling solutions",
            "service_types": [
                {"id": "maintenance", "name": "Maintenance/Tune-ups", "icon": "🛠️",
                 "description": "Regular maintenance to ensure optimal performance",
                 "items": _COOLING_ITEMS},
                {"id": "repairs", "name": "Repairs", "icon": "🔧",
                 "description": "Expert repair services for cooling systems",
                 "items": _COOLING_ITEMS},
                {"id": "inspections", "name": "Inspections", "icon": "🔍",
                 "description": "Thorough inspections to identify issues early",
                 "items": _COOLING_ITEMS},
                {"id": "installations", "name": "Installations", "icon": "🏠",
                 "description": "Professional installation of cooling equipment",
                 "items": _COOLING_ITEMS},
                {"id": "emergency", "name": "Emergency Services", "icon": "🚨",
                 "description": "24/7 emergency cooling services",
                 "items": [], "allow_empty_items": True},
            ],
        },
        {
            "id": "heating",
            "name": "Heating",
            "icon": "🔥",
            "description": "Comprehensive heating solutions for your home",
            "service_types": [
                {"id": "maintenance", "name": "Maintenance/Tune-ups", "icon": "🛠️",
                 "description": "Regular maintenance to ensure optimal heating performance",
                 "items": _HEATING_ITEMS},
                {"id": "repairs", "name": "Repairs", "icon": "🔧",
                 "description": "Expert repair services for heating systems",
                 "items": _HEATING_ITEMS},
                {"id": "inspections", "name": "Inspections", "icon": "🔍",
                 "description": "Thorough inspections of heating systems",
                 "items": _HEATING_ITEMS},
                {"id": "installations", "name": "Installations", "icon": "🏠",
                 "description": "Professional installation of heating equipment",
                 "items": _HEATING_ITEMS},
                {"id": "emergency", "name": "Emergency Services", "icon": "🚨",
                 "description": "24/7 emergency heating services",
                 "items": [], "allow_empty_items": True},
            ],
        },
        {
            "id": "indoor-air",
            "name": "Indoor Air",
            "icon": "💨",
            "description": "Improve indoor air quality in your home",
            "service_types": [
                {"id": "solutions", "name": "Air Quality Solutions", "icon": "💧",
                 "description": "Comprehensive indoor air quality solutions",
                 "items": [
                     {"id": "air-purifiers", "name": "Air Purifiers", "icon": "🌬️"},
                     {"id": "humidifiers", "name": "Humidifiers", "icon": "💦"},
                     {"id": "dehumidifiers", "name": "Dehumidifiers", "icon": "🌡️"},
                 ]},
            ],
        },
    ],
}
