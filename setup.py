import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="vcdprobe",
    version="0.0.1",
    author="Fredrik Feyling",
    author_email="fredrik.feyling@hotmail.com",
    description="Value Change Dump toggle statistics and counter detection",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={'': '.'},
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.10',
    install_requires = [
        'numpy',
        'shlib',
        'pint',
        'click',
        'pandas',
        'pyyaml',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'vcdprobe = vcdprobe.vcdprobe:cli',
        ],
    },
)
