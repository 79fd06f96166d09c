"""
Configuration settings for the stroke recognizers.
"""

import math


class RecognizerConfig:
    """Configuration constants shared by the recognition algorithms."""
    
    # Resampling
    DEFAULT_RESAMPLING_POINTS = 32
    
    # Geometric template matching ($1, $N, Protractor)
    SQUARE_SIZE = 250.0
    ONE_D_THRESHOLD = 0.25  # usually 0.20 - 0.35, depends on the gesture set
    ANGLE_RANGE = math.radians(45.0)
    ANGLE_PRECISION = math.radians(2.0)
    PHI = 0.5 * (-1.0 + math.sqrt(5.0))  # golden ratio
    DIAGONAL = math.sqrt(SQUARE_SIZE ** 2 + SQUARE_SIZE ** 2)
    HALF_DIAGONAL = 0.5 * DIAGONAL
    
    # $N start direction filter
    START_ANGLE_THRESHOLD = math.radians(30.0)
    START_VECTOR_DIVISOR = 8  # start vector runs from point 0 to point N/8
    
    # Point clouds ($P, $Q)
    CLOUD_STEP_EXPONENT = 0.5  # starting offsets are sampled every n ** 0.5 points
    MAX_INT_COORD = 1024  # integer coordinates range over [0, MAX_INT_COORD - 1]
    LUT_SIZE = 64
    LUT_SCALE_FACTOR = MAX_INT_COORD / LUT_SIZE
    
    # Shape distance (!FTL, !NFTL)
    NLSD_SCALE = 100.0
    
    # Rubine
    RUBINE_MIN_EXAMPLES = 2
    RUBINE_FILTER_DISTANCE = 0.0003  # measured after scaling into the unit square
    RUBINE_FEATURES = [
        'initial angle cosine',
        'initial angle sine',
        'bounding box length',
        'bounding box diagonal angle',
        'start to end distance',
        'start to end angle cosine',
        'start to end angle sine',
        'total gesture length',
        'total angle traversed',
        'sum of absolute angles traversed',
        'sum of squared angles traversed',
        'maximum squared speed',
        'path duration'
    ]
    
    # Label reported when no template qualifies
    NO_MATCH = 'No match'
