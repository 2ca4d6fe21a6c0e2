from pytimsort.entrypoint import main

main()
