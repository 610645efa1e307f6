"""Project-wide constants."""

DOMAINS = ("weather", "soil", "vegetation", "precipitation")

SEASONS = ["Spring", "Summer", "Fall", "Winter"]

GROWTH_STAGES = ["empty", "seedling", "vegetative", "flowering", "fruiting", "mature"]

# (upper bound on progress, stage); progress at or past the last bound is mature
STAGE_THRESHOLDS = [
    (0.25, "seedling"),
    (0.50, "vegetative"),
    (0.75, "flowering"),
    (1.00, "fruiting"),
]

STRESS_FACTORS = {
    "temperature": 0.95,
    "water": 0.98,
    "nutrient": 0.99,
    "vegetation": 0.97,
}

NDVI_STRESS_THRESHOLD = 0.4
FERTILITY_STRESS_THRESHOLD = 0.5
MOISTURE_FLOOR = 0.1
MOISTURE_DRIFT = 0.02
SOIL_HEALTH_GAIN = 0.001

ACTION_COSTS = {
    "irrigate": 20,
    "fertilize": 30,
    "installDripIrrigation": 200,
    "feedLivestock": 10,
    "waterLivestock": 5,
}

IRRIGATION = {"moisture_gain": 0.3, "score": 10, "water_usage": 100}
FERTILIZATION = {"fertility_gain": 0.2, "score": 15, "carbon_footprint": 0.5}
LEGUME_ROTATION = {"fertility_gain": 0.3, "sustainability": 5}
DRIP_IRRIGATION = {"sustainability": 10}
HARVEST_PRICE_PER_UNIT = 2
LIVESTOCK_CARE = {"feed_health_gain": 0.1, "water_productivity_gain": 0.05}

BIODIVERSITY_CROP_TYPES = 5

VEGETATION_HEALTH = [
    (0.3, "Poor"),
    (0.5, "Fair"),
    (0.7, "Good"),
]

PRECIPITATION_TYPES = [
    (2.0, "Drizzle"),
    (10.0, "Light Rain"),
]

# |lat| upper bound -> climate band
CLIMATE_BANDS = [(30.0, "tropical"), (60.0, "temperate")]

# Cloud cover at 100% removes this share of clear-sky radiation
CLOUD_ATTENUATION = 0.7

LATITUDE_REGIONS = [
    (66.5, "Arctic"),
    (23.5, "Northern Temperate"),
    (0.0, "Northern Tropics"),
    (-23.5, "Southern Tropics"),
    (-66.5, "Southern Temperate"),
]
