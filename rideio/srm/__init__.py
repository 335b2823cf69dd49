"""
Decode Schoberer Rad Messtechnik (SRM) power files, versions 6 and 7.

The decoding follows the GoldenCheetah reader [1]_, so its handling of
srmwin's quirks (zero-based or inverted markers, blocks whose clocks overlap)
carries over. Multi-byte fields are read big-endian.

Nothing is registered on import; a dispatcher that wants SRM support calls
`register` with its `FormatRegistry`.


.. [1] https://github.com/GoldenCheetah/GoldenCheetah/blob/master/src/FileIO/SrmRideFile.cpp

"""
from rideio.srm._reading import read_and_format as read
from rideio.srm._reading import decode, gen_records, register, SrmFileReader
