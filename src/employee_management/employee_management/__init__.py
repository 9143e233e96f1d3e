"""Employee Management package.

This package is organized by feature modules (employees) with a thin Flask
controller layer on top of service/mapper/repository layers.
"""
