from setuptools import setup, find_packages

setup(
    name="power_monitor",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "pandas",
        "matplotlib",
        "nvidia-ml-py",
        "torch",
        "psutil",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest", "numpy"],
    },
)
