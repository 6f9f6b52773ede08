from setuptools import setup, find_packages

setup(
    name="pose-factors",
    version="0.1.0",
    description="Autodiff residual models for pose-graph and sensor-fusion estimation",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "attrs",
        "numpy",
        "scipy",
        "jax",
        "jaxlie",
        "PyYAML",
    ],
    extras_require={
        "gtsam": ["gtsam"],
        "test": ["pytest", "gtsam"],
    },
)
