from setuptools import setup, find_packages

setup(
    name="polyscheme",
    version="1.0",
    description="Exact rational derivation of polynomial schemes (finite differences, finite volumes, Hermite splines)",
    long_description=("Derives finite difference stencils, finite volume reconstruction coefficients and Hermite "
                      "splines as exact fractions, by solving linear constraints on the coefficients of an unknown "
                      "polynomial with exact rational Gauss-Jordan elimination"),
    long_description_content_type="text/plain",
    license="Apache License 2.0",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=["numpy", "sympy"],
    extras_require={
        "flint": ["python-flint"],
        "test": ["pytest", "pytest-timeout"],
    },
    classifiers=[
        "Intended Audience :: Science/Research", "Development Status :: 3 - Alpha", "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10", "Programming Language :: Python :: 3.11", "Programming Language :: Python :: 3.12",
        "Natural Language :: English", "Operating System :: OS Independent", "Topic :: Scientific/Engineering :: Mathematics"
    ],
    keywords=["finite differences", "finite volumes", "stencil", "rational arithmetic", "Gauss-Jordan"],
    zip_safe=False,
)
