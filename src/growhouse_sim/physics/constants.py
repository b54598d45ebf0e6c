"""Constants for greenhouse climate and plant growth calculations.

All rates are per simulated minute unless noted otherwise.
"""

from typing import Final

# =============================================================================
# Simulated time
# =============================================================================

#: Minutes in one simulated day
MINUTES_PER_DAY: Final[int] = 1440

#: Default simulated day the clock starts on
DEFAULT_START_DAY: Final[int] = 100

#: Real time per simulated minute at 1x speed (ms)
DEFAULT_BASE_TICK_INTERVAL_MS: Final[float] = 100.0

#: Upper bound for the speed multiplier
MAX_SPEED: Final[float] = 1000.0

#: Lower bound for the effective tick interval (ms)
MIN_TICK_INTERVAL_MS: Final[float] = 1.0

# =============================================================================
# Greenhouse climate
# =============================================================================

#: Sunlight reaching an unshaded greenhouse (lux)
BASE_LIGHT_INTENSITY: Final[float] = 1000.0

#: Temperature rise per lux of light, applied per hour (3 C per 500 lux)
LIGHT_HEAT_COEFFICIENT: Final[float] = 3.0 / 500.0

#: Minutes for the fan to fully exchange greenhouse air with outside air
VENTILATION_EXCHANGE_TIME: Final[int] = 30

#: Fraction of the inside/outside temperature gap closed per minute of ventilation
VENTILATION_TEMPERATURE_PULL: Final[float] = 0.1

#: Humidity of outside air assumed during ventilation (%)
OUTSIDE_HUMIDITY_REFERENCE: Final[float] = 60.0

#: Fraction of the humidity gap closed per minute at full exchange
VENTILATION_HUMIDITY_PULL: Final[float] = 0.05

#: Absolute humidity ceiling; moisture above this escapes (%)
MAX_HUMIDITY: Final[float] = 85.0

#: Greenhouse temperature bounds (C)
MIN_GREENHOUSE_TEMPERATURE: Final[float] = 0.0
MAX_GREENHOUSE_TEMPERATURE: Final[float] = 70.0

#: Shading actuator bounds (%)
MIN_SHADING: Final[float] = 0.0
MAX_SHADING: Final[float] = 100.0

# =============================================================================
# Soil
# =============================================================================

#: Moisture added while the water actuator is on (%)
WATER_INCREASE_RATE: Final[float] = 3.0

#: Maximum evaporation at hot, dry conditions (%)
EVAPORATION_RATE: Final[float] = 0.6

#: Fertility added while water and fertilizer are both on (%)
FERTILIZER_RATE: Final[float] = 20.0

#: Fertility lost every minute (%)
FERTILIZER_DECAY: Final[float] = 1.0

#: Soil bounds (%)
MAX_SOIL_MOISTURE: Final[float] = 100.0
MAX_SOIL_FERTILITY: Final[float] = 150.0

#: Fertility ceiling after replanting (%)
REPLANT_FERTILITY_CAP: Final[float] = 100.0

#: Fertility added by replanting (%)
REPLANT_FERTILITY_BOOST: Final[float] = 20.0

# =============================================================================
# Plants
# =============================================================================

#: Growth under optimal conditions (cm per minute)
BASE_GROWTH_RATE: Final[float] = 0.2

#: Optimal growth temperature (C)
OPTIMAL_TEMPERATURE: Final[float] = 22.0

#: No growth below this temperature (C)
MIN_GROWTH_TEMPERATURE: Final[float] = 5.0

#: Growth declines steeply above this temperature (C)
HIGH_GROWTH_TEMPERATURE: Final[float] = 40.0

#: Plants die above this temperature (C)
DEATH_TEMPERATURE: Final[float] = 60.0

#: Optimal soil moisture band (%)
OPTIMAL_MOISTURE_MIN: Final[float] = 50.0
OPTIMAL_MOISTURE_MAX: Final[float] = 80.0

#: Optimal soil fertility band (%)
OPTIMAL_FERTILITY_MIN: Final[float] = 60.0
OPTIMAL_FERTILITY_MAX: Final[float] = 100.0

#: Fertility excess over which growth drops to zero (%)
OVER_FERTILITY_SPAN: Final[float] = 50.0

#: Optimal total light band, house plus table lamps (lux)
OPTIMAL_LIGHT_MIN: Final[float] = 400.0
OPTIMAL_LIGHT_MAX: Final[float] = 800.0

#: Light factor never drops below this under excess light
MIN_EXCESS_LIGHT_FACTOR: Final[float] = 0.5

#: Consecutive minutes above 100 % fertility that kill a table
OVER_FERTILIZATION_DEATH_MINUTES: Final[int] = 10

#: Soil moisture under which plants die of drought (%)
DROUGHT_MOISTURE: Final[float] = 10.0

#: Fraction of the population lost per drought minute
DROUGHT_DEATH_FRACTION: Final[float] = 0.01

#: Seedlings on a full table (60 x 8 grid)
FULL_TABLE_PLANTS: Final[int] = 480

#: Population under which a table is replanted (5 % of a full table)
REPLANT_THRESHOLD: Final[int] = 24

#: Seedling size (cm)
SEEDLING_SIZE: Final[float] = 2.0

#: Spacing a fully grown plant needs (cm per side)
MATURE_PLANT_SPACING: Final[float] = 15.0

#: Plants are shippable from this size (cm)
HARVEST_SIZE: Final[float] = 30.0

#: Soil must be at most this wet to harvest (%)
HARVEST_MAX_MOISTURE: Final[float] = 50.0

#: Fraction of the population removed by a harvest
HARVEST_FRACTION: Final[float] = 0.95

#: Table lamp bounds (lumens)
MIN_ART_LIGHT: Final[float] = 0.0
MAX_ART_LIGHT: Final[float] = 2000.0

# =============================================================================
# Seed values
# =============================================================================

#: Initial soil moisture of a new table (%)
SEED_SOIL_MOISTURE: Final[float] = 80.0

#: Initial soil fertility of a new table (%)
SEED_SOIL_FERTILITY: Final[float] = 100.0

#: Initial air temperature (C)
SEED_TEMPERATURE: Final[float] = 20.0

#: Initial greenhouse humidity (%)
SEED_HUMIDITY: Final[float] = 60.0

#: Initial greenhouse light before the first tick (lux)
SEED_LIGHT_INTENSITY: Final[float] = 500.0
