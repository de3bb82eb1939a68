import setuptools

import proctl.version

with open("README.md", "r") as readme:
    long_description = readme.read()

setuptools.setup(
    name='proctl',
    version=proctl.version.VERSION,
    description='Find, inspect, and control unix processes using ps and lsof',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=setuptools.find_namespace_packages(include=['proctl', 'proctl.*']),
    scripts=['bin/proctl'],
    install_requires=[
        'psutil',
        'prompt_toolkit',
    ],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Operating System :: POSIX'
    ],
    python_requires='>=3.7'
)
