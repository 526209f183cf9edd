"""Commercial services — HVAC and refrigeration for businesses."""

_COOLING_ITEMS = [
    {"id": "commercial-refrigeration", "name": "Commercial Refrigeration Systems", "icon": "🧊"},
    {"id": "data-center-cooling", "name": "Data Center Cooling", "icon": "💻"},
    {"id": "rooftop-units", "name": "Rooftop Units", "icon": "🏢"},
    {"id": "central-ac", "name": "Central AC", "icon": "❄️"},
    {"id": "mini-splits", "name": "Mini Splits", "icon": "🔄"},
    {"id": "heat-pumps", "name": "Heat Pumps", "icon": "♨️"},
]

_HEATING_ITEMS = [
    {"id": "furnaces", "name": "Furnaces", "icon": "🔥"},
    {"id": "boilers", "name": "Boilers", "icon": "🧯"},
    {"id": "rooftop-units", "name": "Rooftop Units", "icon": "🏢"},
    {"id": "heat-pumps", "name": "Heat Pumps", "icon": "♨️"},
    {"id": "mini-splits", "name": "Mini Splits", "icon": "🔄"},
]

CATEGORY = {
    "id": "commercial",
    "name": "Commercial Services",
    "description": "Complete HVAC solutions for your business",
    "systems": [
        {
            "id": "cooling",
            "name": "Cooling",
            "icon": "❄️",
            "description": "Commercial cooling and refrigeration solutions",
            "service_types": [
                {"id": "maintenance", "name": "Maintenance/Tune-ups", "icon": "🛠️",
                 "description": "Regular maintenance for commercial cooling systems",
                 "items": _COOLING_ITEMS},
                {"id": "repairs", "name": "Repairs", "icon": "🔧",
                 "description": "Expert repair services for commercial cooling",
                 "items": _COOLING_ITEMS},
                {"id": "inspections", "name": "Inspections", "icon": "🔍",
                 "description": "Thorough inspections of commercial cooling systems",
                 "items": _COOLING_ITEMS},
                {"id": "installations", "name": "Installations", "icon": "🏠",
                 "description": "Professional installation of commercial cooling equipment",
                 "items": _COOLING_ITEMS},
                {"id": "emergency", "name": "Emergency Services", "icon": "🚨",
                 "description": "24/7 emergency cooling and refrigeration services",
                 "items": [], "allow_empty_items": True},
            ],
        },
        {
            "id": "heating",
            "name": "Heating",
            "icon": "🔥",
            "description": "Commercial heating solutions for your business",
            "service_types": [
                {"id": "maintenance", "name": "Maintenance/Tune-ups", "icon": "🛠️",
                 "description": "Regular maintenance for commercial heating systems",
                 "items": _HEATING_ITEMS},
                {"id": "repairs", "name": "Repairs", "icon": "🔧",
                 "description": "Expert repair services for commercial heating systems",
                 "items": _HEATING_ITEMS},
                {"id": "inspections", "name": "Inspections", "icon": "🔍",
                 "description": "Thorough inspections of commercial heating systems",
                 "items": _HEATING_ITEMS},
                {"id": "installations", "name": "Installations", "icon": "🏠",
                 "description": "Professional installation of commercial heating equipment",
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
            "description": "Improve indoor air quality in commercial spaces",
            "service_types": [
                {"id": "solutions", "name": "Air Quality Solutions", "icon": "💧",
                 "description": "Comprehensive indoor air quality solutions for businesses",
                 "items": [
                     {"id": "air-purifiers", "name": "Air Purifiers", "icon": "🌬️"},
                     {"id": "humidifiers", "name": "Humidifiers", "icon": "💦"},
                     {"id": "dehumidifiers", "name": "Dehumidifiers", "icon": "🌡️"},
                 ]},
            ],
        },
    ],
}
