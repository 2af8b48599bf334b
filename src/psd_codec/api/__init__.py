"""
High-level API for decoded PSD/PSB documents.

This subpackage turns the low-level :py:mod:`psd_codec.psd` binary
structures into plain decoded data, and builds them back for encoding.

Key modules:

- :py:mod:`psd_codec.api.document`: Document, Layer and encoder input models
- :py:mod:`psd_codec.api.writer`: Encoder of simplified documents
- :py:mod:`psd_codec.api.numpy_io`: Channel planes to RGBA arrays
- :py:mod:`psd_codec.api.color_space`: CMYK, Lab and indexed color to RGB
- :py:mod:`psd_codec.api.mask`: User mask compositing
- :py:mod:`psd_codec.api.pil_io`: PIL/Pillow image I/O utilities
"""
