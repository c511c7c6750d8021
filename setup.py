from setuptools import setup, find_packages

setup(
  name='testgrouper',
  version=0.1,
  packages=find_packages(exclude=['tests']),
  python_requires='>=3.11',
  install_requires=[
    'numpy', 'pandas'
  ],
  extras_require={
    'test': ['pytest'],
  },
)
