from tcdd_hunter.main import main

main()
