"""
Packaging for graphstream-connector-py.

Tests live beside the modules they test (*_test.py) and run with `python -m pytest src`.
"""

from setuptools import setup


setup(
    name='graphstream-connector-py',
    version='0.1.0',
    description='Connection and lifecycle layer for graph streaming clients.',
    url='',
    author='',
    author_email='',
    license='GPLv3',
    package_dir={'': 'src'},
    packages=['graphstream', 'graphstream.conduit', 'graphstream.config', 'graphstream.connector',
              'graphstream.support'],
    package_data={'graphstream': ['*.cfg']},
    python_requires='>=3.8',
    install_requires=[
        'httpx>=0.23',
        'certifi',
        'configobj>=5.0.6,<5.1',
    ],
    extras_require={
        'test': [
            'pytest',
            'PyHamcrest>=2.0',
            'timeout-decorator',
        ],
    },
    zip_safe=False,
)
