"""Compression, local address and unique-set helpers."""