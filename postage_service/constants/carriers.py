"""
Carrier Constants

Wire-level identifiers used by the carrier providers.
"""

# ============================================================================
# Australia Post
# ============================================================================

AUSPOST_CALCULATE_PATH = "/postage/parcel/domestic/calculate.json"
AUSPOST_SERVICE_EXPRESS = "AUS_PARCEL_EXPRESS"
AUSPOST_SERVICE_REGULAR = "AUS_PARCEL_REGULAR"

# Used when the response omits delivery_time: (min, max) days
AUSPOST_DEFAULT_ETA_EXPRESS = (1, 3)
AUSPOST_DEFAULT_ETA_STANDARD = (2, 6)


# ============================================================================
# Shippit
# ============================================================================

SHIPPIT_QUOTES_PATH = "/quotes"
SHIPPIT_SERVICE_EXPRESS = "express"
SHIPPIT_SERVICE_STANDARD = "standard"


# ============================================================================
# ShipStation
# ============================================================================

SHIPSTATION_ESTIMATE_PATH = "/v2/rates/estimate"


# ============================================================================
# AfterShip
# ============================================================================

AFTERSHIP_RATES_PATH = "/rates"

# Checked in order for the rate's charge and service label
AFTERSHIP_MONEY_FIELDS = ("total_charge", "shipping_amount", "total_amount", "amount")
AFTERSHIP_SERVICE_FIELDS = ("service_type", "service_name", "service_level", "courier_name")


# ============================================================================
# Aramex (SOAP RateCalculator)
# ============================================================================

ARAMEX_SOAP_ACTION = "http://ws.aramex.net/ShippingAPI/v1/Service_1_0/CalculateRate"
ARAMEX_SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
ARAMEX_TYPES_NS = "http://ws.aramex.net/ShippingAPI/v1/"

ARAMEX_DEFAULT_ACCOUNT_COUNTRY = "AU"
ARAMEX_DEFAULT_PRODUCT_GROUP = "EXP"
ARAMEX_DEFAULT_PRODUCT_TYPE = "PPX"
ARAMEX_DEFAULT_PAYMENT_TYPE = "P"
ARAMEX_DEFAULT_VERSION = "v1.0"
