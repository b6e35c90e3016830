"""
Benchmark suite for acfjson conversion performance.

Measures conversion throughput and memory usage across generated ACF
documents, and checks the emitted JSON against downstream parsers:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)
"""
