"""
Fixed input formats of the push pipelines.

The caps must match what the AirPlay sender emits byte for byte. The codec_data
blobs are the decoder configurations mandated by the protocol; the decoders
reject or mis-decode the stream if they differ.
"""

from __future__ import annotations

H264_SOURCE_NAME = "h264-src"
H264_CAPS = (
    "video/x-h264,colorimetry=bt709,"
    "stream-format=(string)byte-stream,alignment=(string)au"
)

# ALACSpecificConfig: frame length 352, 16 bit, 2 channels, 44100 Hz
ALAC_CODEC_DATA = "00000024616c616300000000000001600010280a0e0200ff00000000000000000000ac44"
ALAC_SOURCE_NAME = "alac-src"
ALAC_DECODER = "avdec_alac"
ALAC_CAPS = (
    "audio/x-alac,mpegversion=(int)4,channels=(int)2,rate=(int)44100,"
    f"stream-format=raw,codec_data=(buffer){ALAC_CODEC_DATA}"
)

# AudioSpecificConfig: AAC-ELD, 44100 Hz, 2 channels, 480 samples per frame
AAC_ELD_CODEC_DATA = "f8e85000"
AAC_ELD_SOURCE_NAME = "aac-eld-src"
AAC_ELD_DECODER = "avdec_aac"
AAC_ELD_CAPS = (
    "audio/mpeg,mpegversion=(int)4,channels=(int)2,rate=(int)44100,"
    f"stream-format=raw,codec_data=(buffer){AAC_ELD_CODEC_DATA}"
)

PLAYLIST_ELEMENT = "playbin3"
