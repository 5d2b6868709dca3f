"""Shared scanning engine for the indicator passes.

The modules here know nothing about specific indicators: they extract strings,
classify text against pattern sets, walk symbol names, and recover fixed-layout
records. Pass modules supply the data that makes them mean something.
"""
