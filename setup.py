import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="mproot",
    version="0.1.0",
    description="One dimensional root finding at arbitrary precision.",
    include_package_data=True,
    install_requires=[
        'mpmath', 'numpy'
    ],
    extras_require={
        'test': ['pytest', 'scipy'],
    },
    keywords='root finding multiple precision bisection brent newton',
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(include=['mproot', 'mproot.*']),
    python_requires='>=3.10',
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.10",
        "Topic :: Scientific/Engineering :: Mathematics"
    ]
)
