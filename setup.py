from setuptools import setup, find_namespace_packages

requirements = []
with open('requirements.txt') as f:
    requirements = f.read().splitlines()


setup(name='heatmap-backreporting',
      version='0.1.0',
      description=("Elevator maintenance heat map",
                   "reconstruct floor trajectories and heat maps from accelerometer data")[0],
      packages=find_namespace_packages(include=[
          'heatmap', 'heatmap.*',
          'recorder', 'recorder.*',
          'utilities', 'utilities.*',
      ]),
      entry_points={
          'console_scripts': [
              'heatmap-recorder = recorder.main:main',
          ]
      },
      install_requires=requirements,
      extras_require={
          'test': ['freezegun', 'pytest'],
      },
      python_requires='>=3.8',
      classifiers=(
          'Intended Audience :: Other Audience',
          'Natural Language :: English',
          'License :: Other/Proprietary License',
          'Programming Language :: Python',
          'Programming Language :: Python :: 3',
          'Programming Language :: Python :: Implementation :: CPython',
      ),
      )
