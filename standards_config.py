# standards_config.py
"""
Reference tables for the HMPI engine and the compliance reports.
Everything here is read-only and loaded once at import.
"""
from types import MappingProxyType

# --- Metals ---
# The five metals the data-entry form and the upload template offer.
METALS = ('Lead', 'Arsenic', 'Chromium', 'Mercury', 'Cadmium')

# --- HMPI Reference Constants ---
# Ii: ideal/standard permissible concentration (mg/L), the HMPI denominator.
# Mi: relative unit weight of the metal.
# Lookup is case-sensitive. Unknown metals use DEFAULT_IDEAL_VALUE / DEFAULT_WEIGHT.
METAL_CONSTANTS = MappingProxyType({
    'Lead':     MappingProxyType({'ideal': 0.01,  'weight': 0.7}),
    'Arsenic':  MappingProxyType({'ideal': 0.01,  'weight': 0.5}),
    'Chromium': MappingProxyType({'ideal': 0.05,  'weight': 0.4}),
    'Mercury':  MappingProxyType({'ideal': 0.001, 'weight': 0.9}),
    'Cadmium':  MappingProxyType({'ideal': 0.003, 'weight': 0.6}),
})
DEFAULT_IDEAL_VALUE = 0.01
DEFAULT_WEIGHT = 0.5

# --- Risk Tiers ---
# Lower bounds are inclusive, checked from the top down. Anything below the
# last bound is 'Safe'.
RISK_THRESHOLDS = (
    (100.0, 'Very High Risk'),
    (50.0, 'High Risk'),
    (25.0, 'Moderate Risk'),
    (10.0, 'Low Risk'),
)
SAFE_TIER = 'Safe'

RISK_COLORS = MappingProxyType({
    'Very High Risk': '#DC2626',
    'High Risk': '#EA580C',
    'Moderate Risk': '#D97706',
    'Low Risk': '#65A30D',
    'Safe': '#059669',
})
UNKNOWN_RISK_COLOR = '#666666'

# --- Regulatory Limits (mg/L) ---
# WHO drinking-water guideline values.
WHO_LIMITS = MappingProxyType({
    'Lead': 0.01,
    'Arsenic': 0.01,
    'Chromium': 0.05,
    'Mercury': 0.006,
    'Cadmium': 0.003,
})

# BBI: secondary baseline standard, permissible limits in the absence of an
# alternate source.
BBI_LIMITS = MappingProxyType({
    'Lead': 0.05,
    'Arsenic': 0.05,
    'Chromium': 0.05,
    'Mercury': 0.001,
    'Cadmium': 0.01,
})

STANDARDS = MappingProxyType({
    'WHO': WHO_LIMITS,
    'BBI': BBI_LIMITS,
})

# --- Alerts ---
# Tier -> alert priority. Tiers not listed here do not raise an alert.
ALERT_PRIORITIES = MappingProxyType({
    'Very High Risk': 'high',
    'High Risk': 'high',
    'Moderate Risk': 'medium',
})

RECOMMENDED_ACTIONS = MappingProxyType({
    'high': 'Immediate water restriction; emergency testing protocol; notify authorities.',
    'medium': 'Increased monitoring; follow-up sampling; review treatment options.',
    'low': 'Continue monitoring; document findings; schedule next review.',
})

# Tiers counted together as "high risk" in report summaries.
HIGH_RISK_TIERS = frozenset({'High Risk', 'Very High Risk'})
