from setuptools import setup, find_packages

package_name = "pendant_teleop"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.26.0",
        "scipy>=1.12.0",
        "pyyaml>=6.0",
        "omegaconf>=2.3.0",
        "transforms3d>=0.4.1",
    ],
    extras_require={
        "test": ["pytest>=7.0.0", "pytest-cov>=4.0.0"],
    },
    entry_points={
        "console_scripts": [
            "run_jog_sim=pendant_teleop.simulators.sim_runner:main",
        ],
    },
    python_requires=">=3.10",
    author="Teleop System Team",
    description="Two-controller arm jogging with a pendant safety gate",
)
