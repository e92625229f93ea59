"""
lane-balance — Lane's balance for alluvial channels.
Balance ratio, regime, active processes, channel pattern and seeded geometry.
"""

from setuptools import setup, find_packages

setup(
    name="lane-balance",
    version="1.0.0",
    description="Lane's balance engine: sediment/transport balance, regime, "
                "channel pattern classification, and deterministic procedural geometry.",
    packages=find_packages(include=["lane_balance", "lane_balance.*"]),
    package_data={"lane_balance": ["data/*.yaml"]},
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
        ],
    },
    entry_points={
        "console_scripts": [
            "lane-balance=lane_balance.cli:main",
        ],
    },
)
