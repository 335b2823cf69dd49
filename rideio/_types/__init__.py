from rideio._types import columns as special_columns
from rideio._types.activitydata import ActivityData
from rideio._types.ridefile import RideFile, RideInterval, RidePoint
