import re
import os.path

from setuptools import setup, find_packages


with open(
    os.path.join(os.path.dirname(__file__), 'kotoba', '__init__.py')
) as f:
    VERSION = re.match(r".*__version__ = \"(.*?)\"", f.read(), re.S).group(1)

with open(
    os.path.join(os.path.dirname(__file__), 'README.rst')
) as f:
    DESCRIPTION = f.read()

setup(
    name='kotoba-gateway',
    version=VERSION,
    description='GraphQL API gateway for the Kotoba server',
    long_description=DESCRIPTION,
    long_description_content_type='text/x-rst',
    packages=find_packages(exclude=['test*', 'examples*']),
    package_data={'kotoba': ['assets/*.html']},
    license='BSD-3-Clause',
    python_requires='>=3.10',
    install_requires=[
        'hiku>=0.8.0rc1,<0.8.0rc23',
        'graphql-core>=3.2',
        'aiohttp>=3.9',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
        ],
    },
    entry_points={
        'console_scripts': [
            'kotoba-server=kotoba.__main__:main',
        ],
    },
    classifiers=[
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3 :: Only',
        'Framework :: AIOHTTP',
    ],
)
