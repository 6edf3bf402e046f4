"""Sat parity tracker: when does one unit of a currency fall to one sat?"""
